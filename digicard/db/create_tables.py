"""
Create (or rebuild) the database schema.

Usage:
  python -m digicard.db.create_tables [--drop]
"""
from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from digicard.core.config import get_settings
from digicard.core.logging import get_logger, setup_logging
from digicard.db import models  # noqa: F401  # registers the tables on Base.metadata
from digicard.db.session import Base, get_engine

logger = get_logger(__name__)


def create_all(*, drop_first: bool = False) -> list[str]:
    engine = get_engine()
    if drop_first:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return sorted(Base.metadata.tables)


def main() -> None:
    ap = argparse.ArgumentParser(description="Create the DigiCard tables")
    ap.add_argument("--drop", action="store_true", help="Drop existing tables first (destroys data)")
    args = ap.parse_args()
    setup_logging(get_settings().log_level)
    try:
        tables = create_all(drop_first=args.drop)
    except SQLAlchemyError as exc:
        logger.error("Schema creation failed", error=str(exc))
        raise SystemExit(1) from exc
    logger.info("Schema ready", tables=tables, dropped=args.drop)


if __name__ == "__main__":
    main()
