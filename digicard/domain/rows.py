"""
Mapping between the nested CardData and the flat persisted profile row.

The row keeps each contact/social field as a ``<name>`` / ``<name>_enabled``
column pair; the email pair is stored as ``email_contact`` / ``email_enabled``.
"""
from __future__ import annotations

from typing import Any, Mapping

from digicard.domain.fields import CardData, FieldName, SocialField

IDENTITY_COLUMNS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "title": "title",
    "company": "company",
    "bio": "bio",
    "avatar": "avatar_url",
}

VALUE_COLUMNS = {name: name.value for name in FieldName}
VALUE_COLUMNS[FieldName.EMAIL] = "email_contact"


def enabled_column(name: FieldName) -> str:
    return f"{FieldName(name).value}_enabled"


PROFILE_ROW_KEYS = tuple(IDENTITY_COLUMNS.values()) + tuple(
    col for name in FieldName for col in (VALUE_COLUMNS[name], enabled_column(name))
)


def card_to_row(card: CardData) -> dict[str, Any]:
    row: dict[str, Any] = {col: getattr(card, attr) for attr, col in IDENTITY_COLUMNS.items()}
    for name in FieldName:
        f = card.field(name)
        row[VALUE_COLUMNS[name]] = f.value
        row[enabled_column(name)] = bool(f.enabled)
    return row


def row_to_card(row: Mapping[str, Any]) -> CardData:
    kwargs: dict[str, Any] = {attr: row.get(col) or "" for attr, col in IDENTITY_COLUMNS.items()}
    for name in FieldName:
        kwargs[name.value] = SocialField(
            value=row.get(VALUE_COLUMNS[name]) or "",
            enabled=bool(row.get(enabled_column(name))),
        )
    return CardData(**kwargs)
