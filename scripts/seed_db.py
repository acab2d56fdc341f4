"""
Seed script for the PawTriage record store (in-memory or Firestore).

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply

Behavior:
  - Loads `db_seed.json` from repo root.
  - Incidents carry `created_hours_ago`; it is turned into `created_at`
    relative to now so the escalation scan has something to find.
  - Writes each top-level collection/document through the RecordStore.

NOTE: When applying to real Firestore, ensure `FIREBASE_CREDENTIALS_PATH` and `USE_MOCK_DB=false` are set in `.env`.
"""

import argparse
import asyncio
import json
import logging
import os
from datetime import timedelta

from pawtriage.services.record_store import RecordStore, get_record_store
from pawtriage.utils.time_helpers import utc_now

logger = logging.getLogger("seed_db")


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def prepare_document(data: dict) -> dict:
    document = dict(data)
    hours_ago = document.pop("created_hours_ago", None)
    if hours_ago is not None:
        created_at = utc_now() - timedelta(hours=hours_ago)
        document.setdefault("created_at", created_at)
        document.setdefault("updated_at", created_at)
    return document


async def write_to_store(store: RecordStore, seed: dict, apply: bool = False) -> int:
    written = 0
    for collection, docs in seed.items():
        for doc_id, data in docs.items():
            logger.info(f"Preparing: {collection}/{doc_id}")
            if not apply:
                continue
            await store.set(collection, doc_id, prepare_document(data))
            logger.info(f"Wrote: {collection}/{doc_id}")
            written += 1
    return written


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        logger.error(f"Seed file not found: {args.seed}")
        raise SystemExit(1)

    seed = load_seed(args.seed)
    written = asyncio.run(write_to_store(get_record_store(), seed, apply=args.apply))

    if args.apply:
        logger.info(f"Seeding completed: {written} documents written.")
    else:
        logger.info("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
