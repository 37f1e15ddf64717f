from __future__ import annotations

import pytest

from digicard.domain.fields import CardData, FieldName, SocialField
from digicard.domain.formatting import (
    build_vcard,
    format_phone_display,
    to_telegram_link,
    to_whatsapp_link,
    trim_display_url,
    vcard_filename,
)


@pytest.mark.parametrize("phone", ["+33612345678", "+33100000000", "+33987654321", "+33 6 12 34 56 78"])
def test_french_numbers_are_grouped(phone):
    out = format_phone_display(phone)
    compact = phone.replace(" ", "")
    assert out.replace(" ", "") == compact
    assert out.count(" ") == 5
    assert len(out) == len(compact) + 5


@pytest.mark.parametrize(
    "phone",
    ["", "+3361234567", "+336123456789", "0612345678", "+44 7700 900123", "+33a12345678", "hello"],
)
def test_other_numbers_are_unchanged(phone):
    assert format_phone_display(phone) == phone


def test_jean_dupont_scenario():
    card = CardData(first_name="Jean", last_name="Dupont", phone=SocialField("+33612345678", True))
    assert format_phone_display(card.phone.value) == "+33 6 12 34 56 78"
    vcard = build_vcard(card)
    assert "TEL;TYPE=CELL:+33612345678" in vcard.splitlines()
    assert "EMAIL" not in vcard
    assert vcard_filename(card) == "Jean_Dupont.vcf"


def test_vcard_field_order_and_no_blank_lines():
    card = CardData(
        first_name="Marie",
        last_name="Martin",
        title="UX Designer",
        company="Creative Studio",
        phone=SocialField("+33612345678", True),
        email=SocialField("marie@example.com", True),
        website=SocialField("https://mariemartin.design", True),
    )
    assert build_vcard(card).splitlines() == [
        "BEGIN:VCARD",
        "VERSION:3.0",
        "FN:Marie Martin",
        "N:Martin;Marie;;;",
        "TITLE:UX Designer",
        "ORG:Creative Studio",
        "TEL;TYPE=CELL:+33612345678",
        "EMAIL:marie@example.com",
        "URL:https://mariemartin.design",
        "END:VCARD",
    ]


@pytest.mark.parametrize(
    "phone",
    [SocialField("+33612345678", True), SocialField("+33612345678", False), SocialField("  ", True), SocialField()],
)
def test_vcard_tel_line_iff_phone_active(phone):
    vcard = build_vcard(CardData(first_name="A", phone=phone, email=SocialField("", True)))
    lines = vcard.split("\n")
    assert lines[0] == "BEGIN:VCARD"
    assert lines[-1] == "END:VCARD"
    assert all(line.strip() for line in lines)
    assert any(line.startswith("TEL") for line in lines) is phone.is_active


def test_whatsapp_link_keeps_digits_only():
    assert to_whatsapp_link("+33 6 12 34 56 78") == "https://wa.me/33612345678"
    assert to_whatsapp_link("(+33) 6-12") == "https://wa.me/33612"
    assert to_whatsapp_link("") == "https://wa.me/"


def test_telegram_link_strips_leading_at():
    assert to_telegram_link("@jean") == "https://t.me/jean"
    assert to_telegram_link("jean") == "https://t.me/jean"
    assert to_telegram_link("") == "https://t.me/"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.example.com/a", "example.com/a"),
        ("http://example.com", "example.com"),
        ("https://linkedin.com/in/jean", "linkedin.com/in/jean"),
        ("example.com", "example.com"),
        ("", ""),
    ],
)
def test_trim_display_url(url, expected):
    assert trim_display_url(url) == expected


def test_vcard_uses_field_name_accessors():
    card = CardData().with_field_value(FieldName.WEBSITE, "https://x.io").with_field_enabled(FieldName.WEBSITE, True)
    assert "URL:https://x.io" in build_vcard(card)


@pytest.mark.parametrize("breaker", ["\n", "\r\n", "\r", "\n\n", "\x0b"])
def test_line_breaks_in_values_cannot_add_properties(breaker):
    card = CardData(
        first_name=f"Jean{breaker}TEL;TYPE=CELL:+10000000000",
        last_name=f"Dupont{breaker}",
        title=f"CEO{breaker}EMAIL:attacker@evil.test{breaker}",
        company=f"ACME{breaker}URL:https://evil.test",
        phone=SocialField("+33612345678", False),
        email=SocialField("jean@example.com", False),
        website=SocialField("", True),
    )
    lines = build_vcard(card).split("\n")
    assert lines[0] == "BEGIN:VCARD"
    assert lines[-1] == "END:VCARD"
    assert len(lines) == 7
    assert all(line.strip() for line in lines)
    assert not any(line.startswith(("TEL", "EMAIL", "URL")) for line in lines)
    assert "\r" not in build_vcard(card)


def test_vcard_text_values_are_escaped():
    card = CardData(
        first_name="Jean;Paul",
        last_name="Du,pont",
        title="CEO\nFounder",
        company="A\\B; C, D",
        email=SocialField("jean@example.com", True),
    )
    lines = build_vcard(card).splitlines()
    assert r"FN:Jean\;Paul Du\,pont" in lines
    assert r"N:Du\,pont;Jean\;Paul;;;" in lines
    assert r"TITLE:CEO\nFounder" in lines
    assert r"ORG:A\\B\; C\, D" in lines
    assert "EMAIL:jean@example.com" in lines


def test_vcard_filename_drops_control_characters():
    assert vcard_filename(CardData(first_name="Jean\r\n", last_name="Dupont")) == "Jean_Dupont.vcf"


@pytest.mark.parametrize("phone", ["+33٦١٢٣٤٥٦٧٨", "+33６12345678"])
def test_only_ascii_digits_are_grouped(phone):
    assert format_phone_display(phone) == phone


def test_whatsapp_link_ignores_non_ascii_digits():
    assert to_whatsapp_link("+33 ٦ 12 34 56 78") == "https://wa.me/3312345678"
