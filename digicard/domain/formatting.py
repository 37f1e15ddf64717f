"""Pure display/export helpers: phone formatting, vCard text and messaging deep links."""
from __future__ import annotations

import re

from digicard.domain.fields import CardData

VCARD_MEDIA_TYPE = "text/vcard"

_WHITESPACE_RE = re.compile(r"\s")
_FR_MOBILE_RE = re.compile(r"(\+33)([0-9])([0-9]{2})([0-9]{2})([0-9]{2})([0-9]{2})")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f\x85\u2028\u2029]")
_URL_PREFIX_RE = re.compile(r"^https?://(www\.)?")


def format_phone_display(phone: str) -> str:
    """
    Group a French number as ``+33 6 12 34 56 78`` for display.
    Anything that is not ``+33`` followed by nine digits is returned untouched.
    """
    cleaned = _WHITESPACE_RE.sub("", phone or "")
    if len(cleaned) == 12 and _FR_MOBILE_RE.fullmatch(cleaned):
        return _FR_MOBILE_RE.sub(r"\1 \2 \3 \4 \5 \6", cleaned)
    return phone


def escape_vcard_text(value: str) -> str:
    """vCard 3.0 TEXT escaping; a value can never span lines or add components."""
    out = (value or "").replace("\\", "\\\\")
    out = out.replace("\r\n", "\\n").replace("\r", "\\n").replace("\n", "\\n")
    out = _CONTROL_RE.sub("", out)
    return out.replace(",", "\\,").replace(";", "\\;")


def build_vcard(card: CardData) -> str:
    esc = escape_vcard_text
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{esc(card.first_name)} {esc(card.last_name)}",
        f"N:{esc(card.last_name)};{esc(card.first_name)};;;",
    ]
    if card.title:
        lines.append(f"TITLE:{esc(card.title)}")
    if card.company:
        lines.append(f"ORG:{esc(card.company)}")
    if card.phone.is_active:
        lines.append(f"TEL;TYPE=CELL:{esc(card.phone.value)}")
    if card.email.is_active:
        lines.append(f"EMAIL:{esc(card.email.value)}")
    if card.website.is_active:
        lines.append(f"URL:{esc(card.website.value)}")
    lines.append("END:VCARD")
    return "\n".join(lines)


def vcard_filename(card: CardData) -> str:
    return _CONTROL_RE.sub("", f"{card.first_name}_{card.last_name}.vcf")


def to_whatsapp_link(phone_value: str) -> str:
    digits = _NON_DIGIT_RE.sub("", phone_value or "")
    return f"https://wa.me/{digits}"


def to_telegram_link(handle: str) -> str:
    cleaned = handle or ""
    if cleaned.startswith("@"):
        cleaned = cleaned[1:]
    return f"https://t.me/{cleaned}"


def trim_display_url(url: str) -> str:
    # display only; the href keeps the stored URL
    return _URL_PREFIX_RE.sub("", url or "")
