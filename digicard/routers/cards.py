from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, Response

from digicard.domain.analytics import EventType
from digicard.domain.formatting import VCARD_MEDIA_TYPE, build_vcard, vcard_filename
from digicard.services.analytics_service import AnalyticsService
from digicard.services.card_display import (
    build_card_view,
    card_share_url,
    qr_filename,
    render_qr_png,
    should_track_view,
)
from digicard.services.card_service import find_card_by_username
from digicard.services.session_service import current_user_id

router = APIRouter(prefix="", tags=["cards"])
analytics_service = AnalyticsService()


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _attachment(filename: str) -> dict:
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "download"
    return {"Content-Disposition": f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"}


@router.get("/card/{username}", response_class=HTMLResponse)
def public_card(username: str, request: Request):
    lookup = find_card_by_username(username)
    templates = _templates(request)
    if not lookup:
        return templates.TemplateResponse(request, "not_found.html", {}, status_code=404)
    if should_track_view(request, lookup.username):
        analytics_service.record(lookup.profile_id, EventType.VIEW)
    view = build_card_view(lookup.card, username=lookup.username, share_url=card_share_url(lookup.username))
    context = {
        "view": view,
        "qr_filename": qr_filename(lookup.username),
        "signed_in": bool(current_user_id(request)),
    }
    return templates.TemplateResponse(request, "card.html", context)


@router.get("/v/{username}.vcf")
def vcard(username: str):
    lookup = find_card_by_username(username)
    if not lookup:
        raise HTTPException(404, "Card not found")
    analytics_service.record(lookup.profile_id, EventType.CONTACT_SAVED)
    return Response(
        build_vcard(lookup.card),
        media_type=f"{VCARD_MEDIA_TYPE}; charset=utf-8",
        headers=_attachment(vcard_filename(lookup.card)),
    )


@router.get("/q/{username}.png")
def qr(username: str):
    lookup = find_card_by_username(username)
    if not lookup:
        raise HTTPException(404, "Card not found")
    png = render_qr_png(card_share_url(lookup.username))
    return Response(png, media_type="image/png", headers=_attachment(qr_filename(lookup.username)))
