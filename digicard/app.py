import os

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from digicard.core.config import get_settings
from digicard.core.logging import get_logger, setup_logging
from digicard.routers import auth as auth_router
from digicard.routers import cards as cards_router
from digicard.routers import dashboard as dashboard_router


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title="DigiCard")

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "..", "web")
os.makedirs(settings.uploads_dir, exist_ok=True)

app.mount("/static/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")
app.mount("/static", StaticFiles(directory=WEB), name="static")
templates = Jinja2Templates(directory=os.path.join(BASE, "..", "templates"))
app.state.templates = templates

app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")


@app.get("/", include_in_schema=False)
def index(request: Request):
    return RedirectResponse("/register", status_code=302)


@app.get("/healthz")
def healthz():
    return {"ok": True}


app.include_router(auth_router.router)
app.include_router(dashboard_router.router)
app.include_router(cards_router.router)


@app.exception_handler(404)
async def not_found(request: Request, exc):
    if request.url.path.startswith(("/v/", "/q/")):
        return HTMLResponse("Card not found", status_code=404)
    return templates.TemplateResponse(request, "not_found.html", {}, status_code=404)


logger.info("Public app configured", app_env=settings.app_env, public_base_url=settings.public_base_url)


def create_app() -> FastAPI:
    """Factory for uvicorn/gunicorn."""
    return app
