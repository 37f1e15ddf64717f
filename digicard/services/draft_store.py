"""
Locally cached card draft.

The draft lives under a single key of a key/value store. It is read once when
an editing session starts and written wholesale on save. Older drafts stored
social fields as bare strings; they are migrated on load.
"""
from __future__ import annotations

import json

from digicard.core.logging import get_logger
from digicard.domain.fields import CardData
from digicard.domain.migration import load_card
from digicard.repositories.json_storage import KeyValueStore

logger = get_logger(__name__)

CARD_CACHE_KEY = "cardData"


class CardDraftStore:
    def __init__(self, store: KeyValueStore, key: str = CARD_CACHE_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> CardData:
        stored = self.store.get(self.key)
        if not stored:
            return CardData.defaults()
        try:
            parsed = json.loads(stored)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable card draft", key=self.key)
            return CardData.defaults()
        return load_card(parsed)

    def save(self, card: CardData) -> None:
        self.store.set(self.key, json.dumps(card.to_dict(), ensure_ascii=False))
