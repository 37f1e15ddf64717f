"""Event recording and admin dashboard aggregation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from digicard.core.logging import get_logger
from digicard.domain import analytics
from digicard.domain.analytics import AdminStats, DailyBucket, EventType
from digicard.domain.demo import DEMO_PROFILE_ID
from digicard.repositories.sql_repository import SQLRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class Dashboard:
    stats: AdminStats
    conversion_rate: float
    series: list[DailyBucket]
    days: int
    usernames: dict


class AnalyticsService:
    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def record(self, profile_id: str, event_type: EventType) -> bool:
        """Append one event. Failures are logged and never break the page being served."""
        if not profile_id or profile_id == DEMO_PROFILE_ID:
            return False
        try:
            self.repository.add_event(profile_id, EventType(event_type).value)
        except SQLAlchemyError as exc:
            logger.warning("Analytics event dropped", profile_id=profile_id, event_type=str(event_type), error=str(exc))
            return False
        return True

    def dashboard(self, days: int = 7, *, now: datetime | None = None) -> Dashboard:
        now = now or datetime.now(timezone.utc)
        profiles = [
            analytics.ProfileSummary(id=p.id, username=p.username, created_at=p.created_at)
            for p in self.repository.list_profiles()
        ]
        events = [
            analytics.AnalyticsEvent(profile_id=e.profile_id, event_type=e.event_type, created_at=e.created_at)
            for e in self.repository.list_events()
        ]
        stats = analytics.aggregate(profiles, events, now=now)
        series = analytics.daily_series(events, days, today=now.date())
        return Dashboard(
            stats=stats,
            conversion_rate=analytics.conversion_rate(stats.totals),
            series=series,
            days=days,
            usernames={p.id: p.username for p in profiles},
        )
