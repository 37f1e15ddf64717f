"""
Double-submit CSRF protection for the HTML forms.

The token travels in a readable cookie and is echoed back in a hidden form
field (or the ``X-CSRF-Token`` header). A cross-site Origin/Referer is refused.
"""
from __future__ import annotations

import secrets
from urllib.parse import urlsplit

from fastapi import HTTPException, Request, Response

from digicard.core.config import get_settings

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "x-csrf-token"
CSRF_COOKIE_MAX_AGE = 7 * 24 * 60 * 60
_MIN_TOKEN_LENGTH = 16


def ensure_csrf_token(request: Request) -> str:
    """Reuse the visitor's cookie token when it looks sane, otherwise mint one."""
    token = request.cookies.get(CSRF_COOKIE_NAME) or ""
    return token if len(token) >= _MIN_TOKEN_LENGTH else secrets.token_urlsafe(32)


def set_csrf_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=CSRF_COOKIE_MAX_AGE,
        httponly=False,
        secure=get_settings().app_env == "prod",
        samesite="strict",
        path="/",
    )


def _same_site_request(request: Request) -> bool:
    source = request.headers.get("origin") or request.headers.get("referer")
    if not source:
        return True
    try:
        source_host = (urlsplit(source).hostname or "").lower()
    except ValueError:
        return False
    request_host = (request.headers.get("host") or "").split(":", 1)[0].lower()
    return not source_host or not request_host or source_host == request_host


def validate_csrf(request: Request, supplied_token: str | None) -> None:
    expected = request.cookies.get(CSRF_COOKIE_NAME) or ""
    supplied = (supplied_token or request.headers.get(CSRF_HEADER_NAME) or "").strip()
    if not expected or not supplied:
        raise HTTPException(403, "Missing CSRF token.")
    if not secrets.compare_digest(expected, supplied):
        raise HTTPException(403, "Invalid CSRF token.")
    if not _same_site_request(request):
        raise HTTPException(403, "Invalid origin.")
