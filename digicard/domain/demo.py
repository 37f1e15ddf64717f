"""Fixed sample card served at /card/demo without touching the database."""
from __future__ import annotations

from digicard.domain.fields import CardData, SocialField
from digicard.domain.usernames import DEMO_USERNAME

DEMO_PROFILE_ID = "demo"

DEMO_CARD = CardData(
    first_name="Marie",
    last_name="Martin",
    title="UX Designer",
    company="Creative Studio",
    bio="Passionate about design and user experience. I create intuitive and elegant interfaces.",
    avatar="",
    phone=SocialField("+33612345678", True),
    email=SocialField("marie@example.com", True),
    website=SocialField("https://mariemartin.design", True),
    linkedin=SocialField("https://linkedin.com/in/mariemartin", True),
    twitter=SocialField("https://twitter.com/mariemartin", True),
    instagram=SocialField("https://instagram.com/mariemartin", True),
    whatsapp=SocialField("+33612345678", True),
)


def is_demo(username: str | None) -> bool:
    return (username or "") == DEMO_USERNAME
