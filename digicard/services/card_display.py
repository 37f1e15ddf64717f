"""Helpers for card display and public card routes."""
from __future__ import annotations

import io
import urllib.parse as urlparse
from dataclasses import dataclass

import qrcode
from fastapi import Request

from digicard.core.config import get_settings
from digicard.domain.fields import CardData
from digicard.domain.formatting import format_phone_display, trim_display_url
from digicard.domain.normalizer import SocialLink, normalize

DEFAULT_AVATAR = "/static/img/avatar.svg"


@dataclass(frozen=True)
class ContactEntry:
    key: str
    label: str
    href: str
    external: bool = False


@dataclass(frozen=True)
class CardView:
    username: str
    display_name: str
    title: str
    company: str
    bio: str
    avatar: str
    has_name: bool
    has_contact_info: bool
    contacts: tuple[ContactEntry, ...]
    social_links: tuple[SocialLink, ...]
    share_url: str
    vcard_path: str
    qr_path: str


def card_share_url(username: str) -> str:
    return f"{get_settings().public_base_url}/card/{urlparse.quote(username or '', safe='')}"


def resolve_avatar(avatar: str | None) -> str:
    if avatar and str(avatar).strip():
        return avatar
    return DEFAULT_AVATAR


def _contact_entries(card: CardData) -> tuple[ContactEntry, ...]:
    entries = []
    if card.phone.is_active:
        entries.append(ContactEntry("phone", format_phone_display(card.phone.value), f"tel:{card.phone.value}"))
    if card.email.is_active:
        entries.append(ContactEntry("email", card.email.value, f"mailto:{card.email.value}"))
    if card.website.is_active:
        entries.append(ContactEntry("website", trim_display_url(card.website.value), card.website.value, external=True))
    return tuple(entries)


def build_card_view(card: CardData, *, username: str, share_url: str | None = None) -> CardView:
    normalized = normalize(card)
    quoted = urlparse.quote(username or "", safe="")
    return CardView(
        username=username,
        display_name=card.full_name,
        title=card.title,
        company=card.company,
        bio=card.bio,
        avatar=resolve_avatar(card.avatar),
        has_name=normalized.has_name,
        has_contact_info=normalized.has_contact_info,
        contacts=_contact_entries(card),
        social_links=normalized.active_social_links,
        share_url=share_url or card_share_url(username),
        vcard_path=f"/v/{quoted}.vcf",
        qr_path=f"/q/{quoted}.png",
    )


def qr_filename(username: str) -> str:
    return f"qrcode-{username}.png"


def render_qr_png(payload: str) -> bytes:
    qr = qrcode.QRCode(version=None, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=8, border=4)
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def should_track_view(request: Request, username: str) -> bool:
    """Count GETs of the card, except reloads coming from the same card page."""
    if request.method.upper() != "GET":
        return False
    referer = request.headers.get("referer")
    if not referer:
        return True
    try:
        parsed = urlparse.urlsplit(referer)
    except ValueError:
        return True
    own_host = (request.headers.get("host") or "").split(":", 1)[0].lower()
    ref_host = (parsed.hostname or "").lower()
    same_host = not ref_host or not own_host or ref_host == own_host
    return not (same_host and parsed.path == f"/card/{username}")
