"""In-memory editing session over a card's working copy."""
from __future__ import annotations

import base64

from digicard.domain.fields import CardData, FieldName


def to_data_url(data: bytes, content_type: str) -> str:
    encoded = base64.b64encode(data or b"").decode("ascii")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


class CardEditor:
    """
    Owns the working copy while a user edits their card.

    Setters only touch the working copy; the caller persists ``card``
    explicitly (draft store or profile service) when the user saves.
    """

    def __init__(self, card: CardData | None = None) -> None:
        self._original = card or CardData.defaults()
        self.card = self._original

    @property
    def dirty(self) -> bool:
        return self.card != self._original

    def set_identity(self, attr: str, value: str) -> CardData:
        self.card = self.card.with_identity(attr, value)
        return self.card

    def set_field_value(self, name: FieldName, value: str) -> CardData:
        self.card = self.card.with_field_value(name, value)
        return self.card

    def set_field_enabled(self, name: FieldName, enabled: bool) -> CardData:
        self.card = self.card.with_field_enabled(name, enabled)
        return self.card

    def toggle_field(self, name: FieldName) -> CardData:
        self.card = self.card.toggle_field(name)
        return self.card

    def set_avatar_data_url(self, data: bytes, content_type: str) -> CardData:
        return self.set_identity("avatar", to_data_url(data, content_type))

    def mark_saved(self) -> None:
        self._original = self.card
