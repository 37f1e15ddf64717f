"""
Load and save the signed-in user's card.

A save is all-or-nothing: when a new avatar is supplied it is stored first and
any upload failure aborts the whole save before the profile row is touched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from digicard.core.logging import get_logger
from digicard.db.models import Profile
from digicard.domain.fields import CardData
from digicard.domain.rows import card_to_row, row_to_card, PROFILE_ROW_KEYS
from digicard.repositories.sql_repository import SQLRepository
from digicard.services.avatar_store import AvatarUpload, AvatarUploadError, LocalAvatarStore

logger = get_logger(__name__)


class ProfileError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProfileNotFoundError(ProfileError):
    pass


class ProfileSaveError(ProfileError):
    pass


@dataclass(frozen=True)
class ProfileRecord:
    id: str
    user_id: str
    username: str
    card: CardData
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def entity_to_row(entity: Profile) -> dict:
    return {key: getattr(entity, key) for key in PROFILE_ROW_KEYS}


def entity_to_record(entity: Profile) -> ProfileRecord:
    return ProfileRecord(
        id=entity.id,
        user_id=entity.user_id,
        username=entity.username,
        card=row_to_card(entity_to_row(entity)),
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


class ProfileService:
    def __init__(self, repository: SQLRepository | None = None, avatar_store: LocalAvatarStore | None = None) -> None:
        self.repository = repository or SQLRepository()
        self.avatar_store = avatar_store or LocalAvatarStore()

    def load(self, user_id: str) -> ProfileRecord:
        try:
            entity = self.repository.get_profile_by_user(user_id)
        except SQLAlchemyError as exc:
            logger.error("Profile load failed", user_id=user_id, error=str(exc))
            raise ProfileError("Failed to load your card. Please try again.") from exc
        if not entity:
            raise ProfileNotFoundError("No card found for this account.")
        return entity_to_record(entity)

    def save(self, user_id: str, card: CardData, avatar: AvatarUpload | None = None) -> ProfileRecord:
        if avatar is not None:
            try:
                avatar_url = self.avatar_store.store(user_id, avatar)
            except AvatarUploadError as exc:
                logger.warning("Avatar upload rejected", user_id=user_id, error=exc.message)
                raise
            card = replace(card, avatar=avatar_url)
        try:
            entity = self.repository.update_profile(user_id, card_to_row(card))
        except SQLAlchemyError as exc:
            logger.error("Profile save failed", user_id=user_id, error=str(exc))
            raise ProfileSaveError(f"Failed to save: {exc.__class__.__name__}") from exc
        if entity is None:
            raise ProfileNotFoundError("No card found for this account.")
        logger.info("Profile saved", user_id=user_id, username=entity.username)
        return entity_to_record(entity)
