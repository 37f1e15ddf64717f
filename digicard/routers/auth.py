from __future__ import annotations

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from digicard.core import csrf
from digicard.core.rate_limiter import rate_limit_ip
from digicard.services.auth_service import AuthService, InvalidCredentialsError, RegistrationError
from digicard.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    current_user_id,
    set_session_cookie,
)

router = APIRouter(prefix="", tags=["auth"])
auth_service = AuthService()


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _form_page(request: Request, template: str, *, error: str = "", status_code: int = 200, **values):
    token = csrf.ensure_csrf_token(request)
    context = {"error": error, "csrf_token": token, **values}
    response = _templates(request).TemplateResponse(request, template, context, status_code=status_code)
    csrf.set_csrf_cookie(response, token)
    return response


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    if current_user_id(request):
        return RedirectResponse("/dashboard", status_code=303)
    return _form_page(request, "register.html", email="", username="")


@router.post("/register", response_class=HTMLResponse)
def register_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    username: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    rate_limit_ip(request, "register", limit=10, window_seconds=600)
    try:
        result = auth_service.register(email, password, username)
    except RegistrationError as exc:
        return _form_page(
            request, "register.html", error=exc.message, status_code=400, email=email, username=username
        )
    response = RedirectResponse("/dashboard", status_code=303)
    set_session_cookie(response, result.session_token)
    return response


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    if current_user_id(request):
        return RedirectResponse("/dashboard", status_code=303)
    return _form_page(request, "login.html", email="")


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    rate_limit_ip(request, "login", limit=20, window_seconds=600)
    try:
        result = auth_service.login(email, password)
    except InvalidCredentialsError as exc:
        return _form_page(request, "login.html", error=exc.message, status_code=400, email=email)
    response = RedirectResponse("/dashboard", status_code=303)
    set_session_cookie(response, result.session_token)
    return response


@router.post("/logout")
def logout(request: Request, csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    auth_service.logout(request.cookies.get(SESSION_COOKIE_NAME))
    response = RedirectResponse("/", status_code=303)
    clear_session_cookie(response)
    return response
