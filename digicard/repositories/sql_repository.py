"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update, delete

from digicard.db.models import AnalyticsEvent, Profile, User, UserSession
from digicard.db.session import get_session
from digicard.domain.rows import PROFILE_ROW_KEYS


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == (email or "").strip().lower())
            return session.execute(stmt).scalar_one_or_none()

    def create_user_with_profile(self, email: str, password_hash: str, username: str) -> tuple[User, Profile]:
        """Insert the account and its empty card in one transaction."""
        now = datetime.now(timezone.utc)
        email_norm = (email or "").strip().lower()
        with get_session() as session:
            user = User(email=email_norm, password_hash=password_hash, created_at=now)
            session.add(user)
            session.flush()
            profile = Profile(
                user_id=user.id,
                username=username,
                email_contact=email_norm,
                created_at=now,
                updated_at=now,
            )
            session.add(profile)
            session.commit()
            session.refresh(user)
            session.refresh(profile)
            return user, profile

    # -------------------------- profiles --------------------------
    def get_profile_by_user(self, user_id: str) -> Optional[Profile]:
        with get_session() as session:
            stmt = select(Profile).where(Profile.user_id == user_id)
            return session.execute(stmt).scalar_one_or_none()

    def get_profile_by_username(self, username: str) -> Optional[Profile]:
        with get_session() as session:
            stmt = select(Profile).where(Profile.username == (username or "").strip())
            return session.execute(stmt).scalar_one_or_none()

    def username_exists(self, username: str) -> bool:
        value = (username or "").strip()
        if not value:
            return False
        with get_session() as session:
            stmt = select(Profile.id).where(Profile.username == value).limit(1)
            return session.execute(stmt).first() is not None

    def list_profiles(self) -> list[Profile]:
        with get_session() as session:
            return session.execute(select(Profile).order_by(Profile.created_at)).scalars().all()

    def update_profile(self, user_id: str, row: dict) -> Optional[Profile]:
        """Overwrite every content column of the user's profile."""
        values = {key: row[key] for key in PROFILE_ROW_KEYS if key in row}
        values["updated_at"] = datetime.now(timezone.utc)
        with get_session() as session:
            stmt = update(Profile).where(Profile.user_id == user_id).values(**values)
            result = session.execute(stmt)
            session.commit()
            if not result.rowcount:
                return None
            stmt = select(Profile).where(Profile.user_id == user_id)
            return session.execute(stmt).scalar_one_or_none()

    # -------------------------- sessions --------------------------
    def create_session(self, user_id: str, expires_at: datetime) -> str:
        token = secrets.token_urlsafe(32)
        with get_session() as session:
            session.add(UserSession(token=token, user_id=user_id, expires_at=expires_at))
            session.commit()
        return token

    def get_user_session(self, token: str) -> Optional[UserSession]:
        with get_session() as session:
            return session.get(UserSession, token)

    def delete_user_session(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.token == token))
            session.commit()

    # -------------------------- analytics --------------------------
    def add_event(self, profile_id: str, event_type: str) -> None:
        with get_session() as session:
            session.add(
                AnalyticsEvent(
                    profile_id=profile_id,
                    event_type=event_type,
                    created_at=datetime.now(timezone.utc),
                )
            )
            session.commit()

    def list_events(self) -> list[AnalyticsEvent]:
        with get_session() as session:
            stmt = select(AnalyticsEvent).order_by(AnalyticsEvent.created_at, AnalyticsEvent.id)
            return session.execute(stmt).scalars().all()
