from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

# Make the digicard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="digicard-uploads-"))
os.environ.setdefault("DATABASE_URL", "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="digicard-db-"), "boot.db"))

from digicard.core import config as core_config  # noqa: E402
from digicard.core.rate_limiter import reset_limits  # noqa: E402
from digicard.db import reset_engine  # noqa: E402
from digicard.db.create_tables import create_all  # noqa: E402


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Temporary SQLite database with a fresh schema; caches reset on both ends."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("ADMIN_EMAILS", "admin@example.com")
    core_config.get_settings.cache_clear()
    reset_engine()
    reset_limits()

    create_all(drop_first=True)

    yield db_file

    reset_engine()
    core_config.get_settings.cache_clear()
