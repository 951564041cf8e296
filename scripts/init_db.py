# This file creates the library schema in the configured database.
# It exists so a fresh environment can be prepared without starting the API.
# `--drop` rebuilds every table from scratch and discards existing rows.
# ruff: noqa: E402

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.api.db_access import DatabaseClient
from src.common.logging import configure_logging
from src.common.settings import get_settings

LOGGER = logging.getLogger("scripts.init_db")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the library database tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--echo", action="store_true", help="log every SQL statement")
    parser.add_argument(
        "--database-url",
        default=None,
        help="override DATABASE_URL from the environment",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()
    database_url = args.database_url or get_settings().DATABASE_URL

    db = DatabaseClient(database_url=database_url, echo=args.echo)
    try:
        if not db.can_connect():
            LOGGER.error("database is not reachable")
            return 1
        db.create_schema(drop_first=args.drop)
        missing = db.missing_tables()
        if missing:
            LOGGER.error("tables still missing after create: %s", ", ".join(missing))
            return 1
    finally:
        db.dispose()

    LOGGER.info("library schema ready drop=%s", args.drop)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
