"""Card field model: identity strings plus independently enabled contact/social fields."""
from __future__ import annotations

from dataclasses import dataclass, field as dc_field, replace
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class SocialField:
    value: str = ""
    enabled: bool = False

    @property
    def is_active(self) -> bool:
        return is_active(self)

    def to_dict(self) -> dict:
        return {"value": self.value, "enabled": self.enabled}


def is_active(field: SocialField) -> bool:
    """A field is shown only when it is enabled and carries a non-blank value."""
    return bool(field.enabled) and field.value.strip() != ""


class FieldName(str, Enum):
    PHONE = "phone"
    EMAIL = "email"
    WEBSITE = "website"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    SNAPCHAT = "snapchat"
    GITHUB = "github"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"


CONTACT_FIELDS = (FieldName.PHONE, FieldName.EMAIL, FieldName.WEBSITE)

# Python attribute name -> serialized (camelCase) key.
IDENTITY_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "title": "title",
    "company": "company",
    "bio": "bio",
    "avatar": "avatar",
}


@dataclass(frozen=True)
class CardData:
    first_name: str = ""
    last_name: str = ""
    title: str = ""
    company: str = ""
    bio: str = ""
    avatar: str = ""

    phone: SocialField = dc_field(default_factory=SocialField)
    email: SocialField = dc_field(default_factory=SocialField)
    website: SocialField = dc_field(default_factory=SocialField)
    linkedin: SocialField = dc_field(default_factory=SocialField)
    twitter: SocialField = dc_field(default_factory=SocialField)
    instagram: SocialField = dc_field(default_factory=SocialField)
    facebook: SocialField = dc_field(default_factory=SocialField)
    tiktok: SocialField = dc_field(default_factory=SocialField)
    youtube: SocialField = dc_field(default_factory=SocialField)
    snapchat: SocialField = dc_field(default_factory=SocialField)
    github: SocialField = dc_field(default_factory=SocialField)
    whatsapp: SocialField = dc_field(default_factory=SocialField)
    telegram: SocialField = dc_field(default_factory=SocialField)

    @classmethod
    def defaults(cls) -> "CardData":
        return cls()

    def field(self, name: FieldName) -> SocialField:
        return getattr(self, FieldName(name).value)

    def with_identity(self, attr: str, value: str) -> "CardData":
        if attr not in IDENTITY_FIELDS:
            raise KeyError(f"unknown identity field: {attr}")
        return replace(self, **{attr: value})

    def with_field_value(self, name: FieldName, value: str) -> "CardData":
        current = self.field(name)
        return replace(self, **{FieldName(name).value: SocialField(value=value, enabled=current.enabled)})

    def with_field_enabled(self, name: FieldName, enabled: bool) -> "CardData":
        current = self.field(name)
        return replace(self, **{FieldName(name).value: SocialField(value=current.value, enabled=bool(enabled))})

    def toggle_field(self, name: FieldName) -> "CardData":
        return self.with_field_enabled(name, not self.field(name).enabled)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {key: getattr(self, attr) for attr, key in IDENTITY_FIELDS.items()}
        for name in FieldName:
            data[name.value] = self.field(name).to_dict()
        return data


def default_card_dict() -> dict[str, Any]:
    """Serialized shape of an empty card, used as migration defaults."""
    return CardData.defaults().to_dict()
