"""
Upgrade older cached/persisted card shapes to the current field model.

Older versions stored contact and social fields as bare strings. They are
wrapped into ``{"value": ..., "enabled": ...}`` on load; unknown keys are
dropped and missing keys fall back to the defaults.
"""
from __future__ import annotations

import copy
from typing import Any, Mapping

from digicard.domain.fields import IDENTITY_FIELDS, CardData, FieldName, SocialField, default_card_dict


def _is_field_shape(value: Any) -> bool:
    return isinstance(value, Mapping) and "value" in value and "enabled" in value


def migrate(raw: Any, defaults: Mapping[str, Any]) -> dict[str, Any]:
    migrated = copy.deepcopy(dict(defaults))
    if not isinstance(raw, Mapping):
        return migrated
    for key, value in raw.items():
        if key not in migrated:
            continue
        if _is_field_shape(migrated[key]) and isinstance(value, str):
            migrated[key] = {"value": value, "enabled": value != ""}
        else:
            migrated[key] = copy.deepcopy(value)
    return migrated


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_field(value: Any) -> SocialField:
    if isinstance(value, SocialField):
        return value
    if isinstance(value, Mapping):
        return SocialField(value=_as_text(value.get("value")), enabled=value.get("enabled") is True)
    return SocialField()


def load_card(raw: Any) -> CardData:
    """Migrate ``raw`` against the empty card and coerce it into a CardData."""
    data = migrate(raw, default_card_dict())
    kwargs: dict[str, Any] = {attr: _as_text(data.get(key)) for attr, key in IDENTITY_FIELDS.items()}
    for name in FieldName:
        kwargs[name.value] = _as_field(data.get(name.value))
    return CardData(**kwargs)
