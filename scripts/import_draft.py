#!/usr/bin/env python3
"""
Import a locally cached card draft (JSON key/value document) into a user's card.

Older drafts stored social fields as plain strings; they are migrated on load.

Usage:
  python scripts/import_draft.py --file drafts.json --username jean [--key cardData] [--dry-run]
"""
from __future__ import annotations

import argparse
import json
import sys

from digicard.domain.rows import card_to_row
from digicard.repositories.json_storage import JsonFileStore
from digicard.repositories.sql_repository import SQLRepository
from digicard.services.draft_store import CARD_CACHE_KEY, CardDraftStore
from digicard.services.profile_service import ProfileError, ProfileService


def main() -> None:
    ap = argparse.ArgumentParser(description="Import a cached card draft into a profile")
    ap.add_argument("--file", required=True, help="JSON document holding the cached draft")
    ap.add_argument("--username", required=True, help="Target card username")
    ap.add_argument("--key", default=CARD_CACHE_KEY, help=f"Draft key (default: {CARD_CACHE_KEY})")
    ap.add_argument("--dry-run", action="store_true", help="Print the migrated row without saving")
    args = ap.parse_args()

    card = CardDraftStore(JsonFileStore(args.file), key=args.key).load()
    if args.dry_run:
        print(json.dumps(card_to_row(card), ensure_ascii=False, indent=2))
        return

    repo = SQLRepository()
    profile = repo.get_profile_by_username(args.username)
    if not profile:
        print(f"ERROR: username '{args.username}' not found.", file=sys.stderr)
        sys.exit(1)
    try:
        ProfileService(repository=repo).save(profile.user_id, card)
    except ProfileError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        sys.exit(1)
    print(f"OK: draft imported into /card/{args.username}")


if __name__ == "__main__":
    main()
