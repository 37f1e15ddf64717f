from __future__ import annotations

import html

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from digicard.core import csrf
from digicard.domain.fields import IDENTITY_FIELDS, CardData, FieldName
from digicard.services.avatar_store import AvatarUpload, AvatarUploadError
from digicard.services.card_display import card_share_url, resolve_avatar
from digicard.services.editor import CardEditor
from digicard.services.profile_service import ProfileError, ProfileRecord, ProfileService
from digicard.services.session_service import current_user_id

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
profile_service = ProfileService()

FIELD_GROUPS = (
    ("Contact", (FieldName.PHONE, FieldName.EMAIL, FieldName.WEBSITE)),
    ("Professional", (FieldName.LINKEDIN,)),
    ("Social", (
        FieldName.TWITTER,
        FieldName.INSTAGRAM,
        FieldName.FACEBOOK,
        FieldName.TIKTOK,
        FieldName.YOUTUBE,
        FieldName.SNAPCHAT,
    )),
    ("Tech", (FieldName.GITHUB,)),
    ("Messaging", (FieldName.WHATSAPP, FieldName.TELEGRAM)),
)


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _render(request: Request, record: ProfileRecord, card: CardData, *, error: str = "", saved: bool = False,
            status_code: int = 200):
    token = csrf.ensure_csrf_token(request)
    context = {
        "username": record.username,
        "card": card,
        "avatar": resolve_avatar(card.avatar),
        "field_groups": FIELD_GROUPS,
        "card_url": card_share_url(record.username),
        "error": error,
        "saved": saved,
        "csrf_token": token,
    }
    response = _templates(request).TemplateResponse(request, "dashboard.html", context, status_code=status_code)
    csrf.set_csrf_cookie(response, token)
    return response


def card_from_form(base: CardData, form) -> CardData:
    """Apply submitted form values to ``base``; the avatar is only changed by an upload."""
    editor = CardEditor(base)
    for attr in IDENTITY_FIELDS:
        if attr == "avatar":
            continue
        editor.set_identity(attr, str(form.get(attr, "") or "").strip())
    for name in FieldName:
        editor.set_field_value(name, str(form.get(name.value, "") or "").strip())
        editor.set_field_enabled(name, bool(form.get(f"{name.value}_enabled")))
    return editor.card


@router.get("", response_class=HTMLResponse)
def dashboard(request: Request, saved: str = ""):
    user_id = current_user_id(request)
    if not user_id:
        return RedirectResponse("/login", status_code=303)
    try:
        record = profile_service.load(user_id)
    except ProfileError as exc:
        return HTMLResponse(f"<h1>{html.escape(exc.message)}</h1>", status_code=500)
    return _render(request, record, record.card, saved=saved == "1")


@router.post("", response_class=HTMLResponse)
async def dashboard_save(request: Request, avatar: UploadFile | None = File(None), csrf_token: str = Form("")):
    user_id = current_user_id(request)
    if not user_id:
        return RedirectResponse("/login", status_code=303)
    csrf.validate_csrf(request, csrf_token)
    try:
        record = profile_service.load(user_id)
    except ProfileError as exc:
        return HTMLResponse(f"<h1>{html.escape(exc.message)}</h1>", status_code=500)

    form = await request.form()
    card = card_from_form(record.card, form)
    upload = None
    if avatar and avatar.filename:
        upload = AvatarUpload(data=await avatar.read(), content_type=avatar.content_type or "", filename=avatar.filename)
    try:
        profile_service.save(user_id, card, avatar=upload)
    except AvatarUploadError as exc:
        return _render(request, record, card, error=exc.message, status_code=400)
    except ProfileError as exc:
        return _render(request, record, card, error=exc.message, status_code=500)
    return RedirectResponse("/dashboard?saved=1", status_code=303)
