from __future__ import annotations

from digicard.domain.demo import DEMO_CARD
from digicard.domain.fields import CardData, FieldName, SocialField
from digicard.domain.normalizer import PLATFORMS, normalize


def _enable(card: CardData, name: FieldName, value: str) -> CardData:
    return card.with_field_value(name, value).with_field_enabled(name, True)


def test_links_follow_platform_order_not_input_order():
    card = CardData()
    card = _enable(card, FieldName.TELEGRAM, "@jean")
    card = _enable(card, FieldName.GITHUB, "https://github.com/jean")
    card = _enable(card, FieldName.LINKEDIN, "https://linkedin.com/in/jean")
    keys = [link.key for link in normalize(card).active_social_links]
    assert keys == ["linkedin", "github", "telegram"]


def test_messaging_links_are_derived():
    card = _enable(_enable(CardData(), FieldName.WHATSAPP, "+33 6 12 34 56 78"), FieldName.TELEGRAM, "@jean")
    links = {link.key: link for link in normalize(card).active_social_links}
    assert links["whatsapp"].href == "https://wa.me/33612345678"
    assert links["telegram"].href == "https://t.me/jean"
    assert links["whatsapp"].label == "WhatsApp"


def test_inactive_fields_are_filtered():
    card = CardData(
        twitter=SocialField("https://twitter.com/x", False),
        instagram=SocialField("   ", True),
        youtube=SocialField("https://youtube.com/@x", True),
    )
    links = normalize(card).active_social_links
    assert [link.key for link in links] == ["youtube"]
    assert links[0].href == "https://youtube.com/@x"


def test_name_and_contact_flags():
    empty = normalize(CardData())
    assert empty.has_name is False and empty.has_contact_info is False
    assert empty.active_social_links == ()

    named = normalize(CardData(last_name="Dupont", website=SocialField("https://x.io", True)))
    assert named.has_name is True
    assert named.has_contact_info is True

    assert normalize(CardData(phone=SocialField("+33", False))).has_contact_info is False


def test_platform_list_is_fixed():
    assert [p.key.value for p in PLATFORMS] == [
        "linkedin", "twitter", "instagram", "facebook", "tiktok",
        "youtube", "snapchat", "github", "whatsapp", "telegram",
    ]


def test_normalize_is_deterministic():
    assert normalize(DEMO_CARD) == normalize(DEMO_CARD)
    keys = [link.key for link in normalize(DEMO_CARD).active_social_links]
    assert keys == ["linkedin", "twitter", "instagram", "whatsapp"]
