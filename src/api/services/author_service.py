# This file implements the author catalog service.
# It exists so routers never open sessions or build queries themselves.
# Deletes are refused while books still point at the author.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.error_handlers import not_found
from src.api.pagination import SortSpec
from src.api.schemas.author_schemas import AuthorCreate, AuthorUpdate
from src.api.services.query_helpers import (
    count_references,
    count_rows,
    fetch_page,
    guarded_session,
    order_by_columns,
    reference_constraint,
)
from src.models import Author, Book

LOGGER = logging.getLogger("api.services.authors")

AUTHOR_SORT_FIELD_MAP = {
    "author_id": Author.author_id,
    "first_name": Author.first_name,
    "last_name": Author.last_name,
}
DEFAULT_AUTHOR_SORT = "author_id:asc"


class AuthorService:
    """CRUD operations for authors."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_authors(self, *, page: int, page_size: int, sort: SortSpec) -> dict[str, Any]:
        statement = select(Author).order_by(
            *order_by_columns(
                sort=sort, field_map=AUTHOR_SORT_FIELD_MAP, tie_breaker=Author.author_id
            )
        )
        with guarded_session(self.db) as session:
            total_count = count_rows(session, statement)
            authors = fetch_page(session, statement, page=page, page_size=page_size)
            rows = [author.as_dict() for author in authors]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_author(self, author_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            return self._load(session, author_id).as_dict()

    def create_author(self, payload: AuthorCreate) -> dict[str, Any]:
        values = payload.model_dump(exclude_none=True)
        with guarded_session(self.db) as session:
            author = Author(**values)
            session.add(author)
            session.flush()
            created = author.as_dict()
        LOGGER.info("author created author_id=%s", created["author_id"])
        return created

    def update_author(self, author_id: int, payload: AuthorUpdate) -> dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True)
        with guarded_session(self.db) as session:
            author = self._load(session, author_id)
            for field_name, value in changes.items():
                setattr(author, field_name, value)
            session.flush()
            updated = author.as_dict()
        LOGGER.info("author updated author_id=%s fields=%s", author_id, sorted(changes))
        return updated

    def delete_author(self, author_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            author = self._load(session, author_id)
            if count_references(session, Book.author_id, author_id):
                raise reference_constraint(
                    "The author cannot be deleted while books reference it."
                )
            deleted = author.as_dict()
            session.delete(author)
        LOGGER.info("author deleted author_id=%s", author_id)
        return deleted

    @staticmethod
    def _load(session: Session, author_id: int) -> Author:
        author = session.get(Author, author_id)
        if author is None:
            raise not_found("Author", author_id)
        return author
