"""
Configuration helpers for the DigiCard backend.

Exposes a Settings object that reads environment variables (public base URL,
database URL, admin allow-list, upload limits) so that routers/services do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    database_url: str
    session_ttl_seconds: int
    admin_emails: frozenset
    uploads_dir: str
    max_upload_bytes: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None) -> frozenset:
        return frozenset(x.strip().lower() for x in (value or "").split(",") if x.strip())

    default_uploads = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "web", "uploads"))
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./digicard.db"),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        admin_emails=_csv(os.getenv("ADMIN_EMAILS")),
        uploads_dir=os.getenv("UPLOADS_DIR", default_uploads),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)), 2 * 1024 * 1024),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
