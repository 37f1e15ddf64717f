"""Derived view of a card: name/contact flags and the ordered list of active social links."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from digicard.domain.fields import CONTACT_FIELDS, CardData, FieldName
from digicard.domain.formatting import to_telegram_link, to_whatsapp_link


@dataclass(frozen=True)
class Platform:
    key: FieldName
    label: str
    icon: str
    link: Optional[Callable[[str], str]] = None


# Presentation order of the social buttons on the public card.
PLATFORMS: tuple[Platform, ...] = (
    Platform(FieldName.LINKEDIN, "LinkedIn", "linkedin"),
    Platform(FieldName.TWITTER, "X (Twitter)", "x-twitter"),
    Platform(FieldName.INSTAGRAM, "Instagram", "instagram"),
    Platform(FieldName.FACEBOOK, "Facebook", "facebook"),
    Platform(FieldName.TIKTOK, "TikTok", "tiktok"),
    Platform(FieldName.YOUTUBE, "YouTube", "youtube"),
    Platform(FieldName.SNAPCHAT, "Snapchat", "snapchat"),
    Platform(FieldName.GITHUB, "GitHub", "github"),
    Platform(FieldName.WHATSAPP, "WhatsApp", "whatsapp", to_whatsapp_link),
    Platform(FieldName.TELEGRAM, "Telegram", "telegram", to_telegram_link),
)


@dataclass(frozen=True)
class SocialLink:
    key: str
    label: str
    icon: str
    value: str
    href: str


@dataclass(frozen=True)
class NormalizedProfile:
    has_name: bool
    has_contact_info: bool
    active_social_links: tuple[SocialLink, ...]


def active_social_links(card: CardData) -> tuple[SocialLink, ...]:
    links = []
    for platform in PLATFORMS:
        field = card.field(platform.key)
        if not field.is_active:
            continue
        href = platform.link(field.value) if platform.link else field.value
        links.append(
            SocialLink(
                key=platform.key.value,
                label=platform.label,
                icon=platform.icon,
                value=field.value,
                href=href,
            )
        )
    return tuple(links)


def normalize(card: CardData) -> NormalizedProfile:
    return NormalizedProfile(
        has_name=bool(card.first_name or card.last_name),
        has_contact_info=any(card.field(name).is_active for name in CONTACT_FIELDS),
        active_social_links=active_social_links(card),
    )
