from __future__ import annotations

import pytest

from digicard.domain.fields import SocialField, default_card_dict
from digicard.domain.migration import load_card, migrate


def test_bare_strings_are_wrapped_into_fields():
    raw = {"firstName": "Jean", "phone": "+33612345678", "twitter": ""}
    out = migrate(raw, default_card_dict())
    assert out["firstName"] == "Jean"
    assert out["phone"] == {"value": "+33612345678", "enabled": True}
    assert out["twitter"] == {"value": "", "enabled": False}


def test_unknown_keys_dropped_and_missing_keys_defaulted():
    out = migrate({"fax": "123", "lastName": "Dupont"}, default_card_dict())
    assert "fax" not in out
    assert out["lastName"] == "Dupont"
    assert out["github"] == {"value": "", "enabled": False}
    assert set(out) == set(default_card_dict())


def test_current_shape_is_copied_as_is():
    raw = {"email": {"value": "a@b.c", "enabled": False}}
    assert migrate(raw, default_card_dict())["email"] == {"value": "a@b.c", "enabled": False}


@pytest.mark.parametrize(
    "raw",
    [
        {"firstName": "Jean", "phone": "+33612345678", "github": {"value": "x", "enabled": True}},
        {"phone": 42, "email": None, "bio": ["not", "a", "string"]},
        {},
        {"telegram": "@jean", "unknown": {"nested": True}},
    ],
)
def test_migrate_is_idempotent(raw):
    defaults = default_card_dict()
    once = migrate(raw, defaults)
    assert migrate(once, defaults) == once


@pytest.mark.parametrize("raw", [None, "cardData", 12, ["phone"]])
def test_non_mapping_input_yields_defaults(raw):
    assert migrate(raw, default_card_dict()) == default_card_dict()


def test_migrate_does_not_mutate_defaults():
    defaults = default_card_dict()
    out = migrate({"phone": "1"}, defaults)
    out["phone"]["value"] = "changed"
    assert defaults["phone"] == {"value": "", "enabled": False}


def test_load_card_coerces_malformed_values():
    card = load_card({"firstName": 7, "phone": {"value": None, "enabled": "yes"}, "whatsapp": "+33 6 12"})
    assert card.first_name == ""
    assert card.phone == SocialField("", False)
    assert card.whatsapp == SocialField("+33 6 12", True)
