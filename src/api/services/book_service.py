# This file implements the book catalog service.
# It exists so foreign-key checks, list joins, and detail shaping live outside the router.
# Missing related records are reported by name before any insert reaches the database.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.error_handlers import not_found, reference_not_found
from src.api.pagination import SortSpec
from src.api.schemas.book_schemas import BookCreate, BookUpdate
from src.api.services.query_helpers import (
    count_references,
    count_rows,
    fetch_row_page,
    guarded_session,
    order_by_columns,
    reference_constraint,
)
from src.models import Author, Book, BookStatus, Category, Editorial, Inventory, Loan

LOGGER = logging.getLogger("api.services.books")

BOOK_SORT_FIELD_MAP = {
    "book_id": Book.book_id,
    "name": Book.name,
    "year_of_edition": Book.year_of_edition,
}
DEFAULT_BOOK_SORT = "book_id:asc"

# Foreign keys a client may set, with the entity each one must reference.
BOOK_REFERENCES: dict[str, tuple[str, type[Any]]] = {
    "category_id": ("Category", Category),
    "editorial_id": ("Editorial", Editorial),
    "author_id": ("Author", Author),
}
NULLABLE_BOOK_FIELDS = {"photo_url", *BOOK_REFERENCES}


def _optional_dict(record: Any) -> dict[str, Any] | None:
    return record.as_dict() if record is not None else None


def book_detail(book: Book) -> dict[str, Any]:
    """Nest a book with its category, editorial, and author (None when unset)."""

    return {
        "book": book.as_dict(),
        "category": _optional_dict(book.category),
        "editorial": _optional_dict(book.editorial),
        "author": _optional_dict(book.author),
    }


class BookService:
    """Catalog operations for books."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_books(
        self,
        *,
        category_id: int | None,
        author_id: int | None,
        editorial_id: int | None,
        status: BookStatus | None,
        page: int,
        page_size: int,
        sort: SortSpec,
    ) -> dict[str, Any]:
        statement = (
            select(
                Book.book_id,
                Book.name,
                Book.num_pages,
                Book.place_of_edition,
                Book.status,
                Category.name.label("category_name"),
                Editorial.name.label("editorial_name"),
                Author.first_name.label("author_first_name"),
                Author.last_name.label("author_last_name"),
            )
            .outerjoin(Category, Book.category_id == Category.category_id)
            .outerjoin(Editorial, Book.editorial_id == Editorial.editorial_id)
            .outerjoin(Author, Book.author_id == Author.author_id)
        )
        if category_id is not None:
            statement = statement.where(Book.category_id == category_id)
        if author_id is not None:
            statement = statement.where(Book.author_id == author_id)
        if editorial_id is not None:
            statement = statement.where(Book.editorial_id == editorial_id)
        if status is not None:
            statement = statement.where(Book.status == status)
        statement = statement.order_by(
            *order_by_columns(sort=sort, field_map=BOOK_SORT_FIELD_MAP, tie_breaker=Book.book_id)
        )

        with guarded_session(self.db) as session:
            total_count = count_rows(session, statement)
            rows = [
                dict(row._mapping)
                for row in fetch_row_page(session, statement, page=page, page_size=page_size)
            ]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_book(self, book_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            return book_detail(self._load(session, book_id))

    def create_book(self, payload: BookCreate) -> dict[str, Any]:
        values = payload.model_dump(exclude_none=True)
        with guarded_session(self.db) as session:
            self._check_references(session, values)
            book = Book(**values)
            session.add(book)
            session.flush()
            detail = book_detail(book)
        LOGGER.info("book created book_id=%s", detail["book"]["book_id"])
        return detail

    def update_book(self, book_id: int, payload: BookUpdate) -> dict[str, Any]:
        changes = {
            field_name: value
            for field_name, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field_name in NULLABLE_BOOK_FIELDS
        }
        with guarded_session(self.db) as session:
            book = self._load(session, book_id)
            self._check_references(session, changes)
            for field_name, value in changes.items():
                setattr(book, field_name, value)
            session.flush()
            # Reload relationships so the detail reflects relinked foreign keys.
            session.expire(book)
            detail = book_detail(book)
        LOGGER.info("book updated book_id=%s fields=%s", book_id, sorted(changes))
        return detail

    def delete_book(self, book_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            book = self._load(session, book_id)
            if count_references(session, Inventory.book_id, book_id):
                raise reference_constraint(
                    "The book cannot be deleted while it has an inventory record."
                )
            if count_references(session, Loan.book_id, book_id):
                raise reference_constraint("The book cannot be deleted while loans reference it.")
            deleted = book.as_dict()
            session.delete(book)
        LOGGER.info("book deleted book_id=%s", book_id)
        return deleted

    @staticmethod
    def _check_references(session: Session, values: dict[str, Any]) -> None:
        for field_name, (entity_name, model) in BOOK_REFERENCES.items():
            reference_id = values.get(field_name)
            if reference_id is not None and session.get(model, reference_id) is None:
                raise reference_not_found(entity_name, reference_id)

    @staticmethod
    def _load(session: Session, book_id: int) -> Book:
        book = session.get(Book, book_id)
        if book is None:
            raise not_found("Book", book_id)
        return book
