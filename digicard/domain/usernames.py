"""Domain helpers for username validation."""
from __future__ import annotations

import re

USERNAME_PATTERN = re.compile(r"[a-z0-9_]+")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
DEMO_USERNAME = "demo"
RESERVED_USERNAMES = {
    DEMO_USERNAME,
    "admin",
    "login",
    "logout",
    "register",
    "dashboard",
    "static",
    "card",
}


def username_error(value: str | None) -> str | None:
    """Return a user-facing message when ``value`` cannot be used as a username."""
    candidate = value or ""
    if not USERNAME_PATTERN.fullmatch(candidate):
        return "Username may only contain lowercase letters, digits and underscores."
    if len(candidate) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters long."
    if len(candidate) > USERNAME_MAX_LENGTH:
        return f"Username must be at most {USERNAME_MAX_LENGTH} characters long."
    if candidate in RESERVED_USERNAMES:
        return "This username is reserved."
    return None


def is_valid_username(value: str | None) -> bool:
    return username_error(value) is None
