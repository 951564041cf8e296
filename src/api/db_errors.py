# This file translates driver-level database failures into API errors.
# It exists so every service maps duplicate keys, bad enum values, and missing fields the same way.
# MySQL error numbers, PostgreSQL SQLSTATE codes, and SQLite messages are all recognized.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import DataError, SQLAlchemyError, StatementError

from src.api.error_handlers import APIError

LOGGER = logging.getLogger("api.db_errors")

DUPLICATE_RECORD = "DUPLICATE_RECORD"
INVALID_VALUE = "INVALID_VALUE"
MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
REFERENCE_CONSTRAINT = "REFERENCE_CONSTRAINT"
DATABASE_ERROR = "DATABASE_ERROR"

MYSQL_ERRNO_KINDS: dict[int, str] = {
    1062: DUPLICATE_RECORD,
    1265: INVALID_VALUE,
    1366: INVALID_VALUE,
    3819: INVALID_VALUE,
    1048: MISSING_REQUIRED_FIELD,
    1364: MISSING_REQUIRED_FIELD,
    1451: REFERENCE_CONSTRAINT,
    1452: REFERENCE_CONSTRAINT,
}

POSTGRES_SQLSTATE_KINDS: dict[str, str] = {
    "23505": DUPLICATE_RECORD,
    "22P02": INVALID_VALUE,
    "23514": INVALID_VALUE,
    "23502": MISSING_REQUIRED_FIELD,
    "23503": REFERENCE_CONSTRAINT,
}

SQLITE_MESSAGE_KINDS: tuple[tuple[str, str], ...] = (
    ("UNIQUE constraint failed", DUPLICATE_RECORD),
    ("CHECK constraint failed", INVALID_VALUE),
    ("NOT NULL constraint failed", MISSING_REQUIRED_FIELD),
    ("FOREIGN KEY constraint failed", REFERENCE_CONSTRAINT),
)

DEFAULT_MESSAGES: dict[str, str] = {
    DUPLICATE_RECORD: "A record with the submitted data already exists. Try different values.",
    INVALID_VALUE: "One of the submitted values is not valid.",
    MISSING_REQUIRED_FIELD: "All required fields must be provided.",
    REFERENCE_CONSTRAINT: "The record is referenced by, or references, rows that prevent this change.",
}


def classify_db_error(exc: SQLAlchemyError) -> str:
    """Return the error kind for a SQLAlchemy exception, or DATABASE_ERROR."""

    orig: Any = getattr(exc, "orig", None)
    if isinstance(exc, StatementError) and isinstance(orig, LookupError):
        return INVALID_VALUE
    if orig is None:
        return DATABASE_ERROR

    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if isinstance(sqlstate, str) and sqlstate in POSTGRES_SQLSTATE_KINDS:
        return POSTGRES_SQLSTATE_KINDS[sqlstate]

    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int) and args[0] in MYSQL_ERRNO_KINDS:
        return MYSQL_ERRNO_KINDS[args[0]]

    message = str(orig)
    for needle, kind in SQLITE_MESSAGE_KINDS:
        if needle in message:
            return kind

    if isinstance(exc, DataError):
        return INVALID_VALUE
    return DATABASE_ERROR


def translate_db_error(
    exc: SQLAlchemyError,
    *,
    messages: dict[str, str] | None = None,
) -> APIError:
    """Build the APIError for a database failure; callers `raise ... from exc`."""

    kind = classify_db_error(exc)
    if kind == DATABASE_ERROR:
        LOGGER.error("unexpected database error", exc_info=exc)
        return APIError(
            status_code=500,
            error_code=DATABASE_ERROR,
            message="The database rejected the operation unexpectedly.",
        )

    message = (messages or {}).get(kind) or DEFAULT_MESSAGES[kind]
    LOGGER.warning("database rejected write kind=%s detail=%s", kind, getattr(exc, "orig", exc))
    return APIError(status_code=400, error_code=kind, message=message)
