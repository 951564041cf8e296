# This file holds the query plumbing shared by every entity service.
# It exists so sorting, counting, and paging follow one deterministic rule set.
# A primary-key tie-breaker is always appended so pages never overlap.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import InstrumentedAttribute, Session

from src.api.db_access import DatabaseClient
from src.api.db_errors import translate_db_error
from src.api.error_handlers import APIError
from src.api.pagination import PageRequest, SortSpec


def order_by_columns(
    *,
    sort: SortSpec,
    field_map: dict[str, InstrumentedAttribute[Any]],
    tie_breaker: InstrumentedAttribute[Any],
) -> list[Any]:
    column = field_map[sort.field]
    ordered = column.desc() if sort.descending else column.asc()
    if column is tie_breaker:
        return [ordered]
    return [ordered, tie_breaker.asc()]


def count_rows(session: Session, statement: Select[Any]) -> int:
    count_statement = select(func.count()).select_from(statement.order_by(None).subquery())
    return int(session.execute(count_statement).scalar_one())


def fetch_page(
    session: Session,
    statement: Select[Any],
    *,
    page: int,
    page_size: int,
) -> list[Any]:
    """Return one page of ORM entities from a single-entity select."""

    offset = PageRequest(page=page, size=page_size).offset
    return list(session.scalars(statement.limit(page_size).offset(offset)).all())


def fetch_row_page(
    session: Session,
    statement: Select[Any],
    *,
    page: int,
    page_size: int,
) -> list[Any]:
    """Return one page of result rows from a multi-column select."""

    offset = PageRequest(page=page, size=page_size).offset
    return list(session.execute(statement.limit(page_size).offset(offset)).all())


@contextmanager
def guarded_session(
    db: DatabaseClient,
    *,
    messages: dict[str, str] | None = None,
) -> Iterator[Session]:
    """`session_scope` whose database failures surface as APIError."""

    try:
        with db.session_scope() as session:
            yield session
    except SQLAlchemyError as exc:
        raise translate_db_error(exc, messages=messages) from exc


def count_references(session: Session, column: InstrumentedAttribute[Any], value: Any) -> int:
    statement = select(func.count()).where(column == value)
    return int(session.execute(statement).scalar_one())


def reference_constraint(message: str) -> APIError:
    return APIError(status_code=400, error_code="REFERENCE_CONSTRAINT", message=message)
