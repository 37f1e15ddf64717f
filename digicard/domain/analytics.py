"""
Usage analytics aggregation for the admin dashboard.

Events are append-only rows ``(profile_id, event_type, created_at)``. The
aggregator counts them globally and per profile and builds a per-calendar-day
series over a trailing window.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence, Union

Timestamp = Union[datetime, str]

RECENT_USERS_WINDOW = timedelta(days=7)
SERIES_WINDOWS = (7, 30, 90)


class EventType(str, Enum):
    VIEW = "view"
    CONTACT_SAVED = "contact_saved"
    WHATSAPP_CLICK = "whatsapp_click"
    LINKEDIN_CLICK = "linkedin_click"


def parse_event_type(value: object) -> Optional[EventType]:
    try:
        return EventType(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class AnalyticsEvent:
    profile_id: str
    event_type: str
    created_at: Timestamp


@dataclass(frozen=True)
class ProfileSummary:
    id: str
    username: str
    created_at: Optional[Timestamp] = None


@dataclass(frozen=True)
class ProfileCounters:
    views: int = 0
    contacts: int = 0


@dataclass(frozen=True)
class Totals:
    total_users: int = 0
    total_views: int = 0
    total_contacts: int = 0
    recent_users: int = 0


class PerProfileCounters(dict):
    """Mapping of profile id to counters; unknown ids read as zero."""

    def __missing__(self, key: str) -> ProfileCounters:
        return ProfileCounters()

    def get(self, key, default=None):
        return self[key] if default is None else super().get(key, default)


@dataclass(frozen=True)
class AdminStats:
    totals: Totals
    per_profile: PerProfileCounters = field(default_factory=PerProfileCounters)


@dataclass(frozen=True)
class DailyBucket:
    day: date
    counts: Mapping[str, int]


def _utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _parse_timestamp(value: Optional[Timestamp]) -> Optional[datetime]:
    if isinstance(value, datetime):
        return _utc(value)
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def event_day(value: Timestamp) -> Optional[date]:
    """Calendar day of an event, read from the date prefix of its timestamp."""
    prefix = value.isoformat()[:10] if isinstance(value, (datetime, date)) else str(value or "")[:10]
    try:
        return date.fromisoformat(prefix)
    except ValueError:
        return None


def _tracked(events: Iterable[AnalyticsEvent]):
    for event in events:
        kind = parse_event_type(event.event_type)
        if kind is not None:
            yield event, kind


def aggregate(
    profiles: Sequence[ProfileSummary],
    events: Sequence[AnalyticsEvent],
    *,
    now: Optional[datetime] = None,
) -> AdminStats:
    now = _utc(now or datetime.now(timezone.utc))
    cutoff = now - RECENT_USERS_WINDOW

    by_type: Counter = Counter()
    views: Counter = Counter()
    contacts: Counter = Counter()
    for event, kind in _tracked(events):
        by_type[kind] += 1
        if kind is EventType.VIEW:
            views[event.profile_id] += 1
        elif kind is EventType.CONTACT_SAVED:
            contacts[event.profile_id] += 1

    recent = 0
    for profile in profiles:
        created = _parse_timestamp(profile.created_at)
        if created is not None and created >= cutoff:
            recent += 1

    per_profile = PerProfileCounters()
    for profile in profiles:
        per_profile[profile.id] = ProfileCounters(views=views[profile.id], contacts=contacts[profile.id])

    totals = Totals(
        total_users=len(profiles),
        total_views=by_type[EventType.VIEW],
        total_contacts=by_type[EventType.CONTACT_SAVED],
        recent_users=recent,
    )
    return AdminStats(totals=totals, per_profile=per_profile)


def conversion_rate(totals: Totals) -> float:
    if totals.total_views <= 0:
        return 0.0
    return totals.total_contacts / totals.total_views


def daily_series(
    events: Sequence[AnalyticsEvent],
    days: int,
    *,
    today: Optional[date] = None,
) -> list[DailyBucket]:
    if days not in SERIES_WINDOWS:
        raise ValueError(f"days must be one of {SERIES_WINDOWS}, got {days!r}")
    today = today or datetime.now(timezone.utc).date()
    start = today - timedelta(days=days - 1)

    counts: dict[date, Counter] = {start + timedelta(days=i): Counter() for i in range(days)}
    for event, kind in _tracked(events):
        day = event_day(event.created_at)
        if day in counts:
            counts[day][kind.value] += 1

    return [
        DailyBucket(day=day, counts={kind.value: bucket[kind.value] for kind in EventType})
        for day, bucket in counts.items()
    ]
