"""
Public card lookups shared across routers/services.
"""

from __future__ import annotations

from dataclasses import dataclass

from digicard.domain.demo import DEMO_CARD, DEMO_PROFILE_ID, is_demo
from digicard.domain.fields import CardData
from digicard.repositories.sql_repository import SQLRepository
from digicard.services.profile_service import entity_to_record

_repo = SQLRepository()


@dataclass(frozen=True)
class CardLookup:
    profile_id: str
    username: str
    card: CardData
    is_demo: bool = False


def find_card_by_username(username: str) -> CardLookup | None:
    """
    Resolve a username to its card. ``demo`` is served from memory.
    """
    value = (username or "").strip()
    if not value:
        return None
    if is_demo(value):
        return CardLookup(profile_id=DEMO_PROFILE_ID, username=value, card=DEMO_CARD, is_demo=True)
    entity = _repo.get_profile_by_username(value)
    if not entity:
        return None
    record = entity_to_record(entity)
    return CardLookup(profile_id=record.id, username=record.username, card=record.card)
