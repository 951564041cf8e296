# This file implements the category service.
# It exists so subject categories can be listed by status and kept unique by name.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.db_errors import DUPLICATE_RECORD
from src.api.error_handlers import not_found
from src.api.pagination import SortSpec
from src.api.schemas.category_schemas import CategoryCreate, CategoryUpdate
from src.api.services.query_helpers import (
    count_references,
    count_rows,
    fetch_page,
    guarded_session,
    order_by_columns,
    reference_constraint,
)
from src.models import Book, Category, RecordStatus

LOGGER = logging.getLogger("api.services.categories")

CATEGORY_SORT_FIELD_MAP = {
    "category_id": Category.category_id,
    "name": Category.name,
    "status": Category.status,
}
DEFAULT_CATEGORY_SORT = "category_id:asc"
CATEGORY_ERROR_MESSAGES = {DUPLICATE_RECORD: "A category with that name already exists."}


class CategoryService:
    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_categories(
        self,
        *,
        status: RecordStatus | None,
        page: int,
        page_size: int,
        sort: SortSpec,
    ) -> dict[str, Any]:
        statement = select(Category)
        if status is not None:
            statement = statement.where(Category.status == status)
        statement = statement.order_by(
            *order_by_columns(
                sort=sort, field_map=CATEGORY_SORT_FIELD_MAP, tie_breaker=Category.category_id
            )
        )
        with guarded_session(self.db) as session:
            total_count = count_rows(session, statement)
            rows = [
                category.as_dict()
                for category in fetch_page(session, statement, page=page, page_size=page_size)
            ]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_category(self, category_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            return self._load(session, category_id).as_dict()

    def create_category(self, payload: CategoryCreate) -> dict[str, Any]:
        with guarded_session(self.db, messages=CATEGORY_ERROR_MESSAGES) as session:
            category = Category(**payload.model_dump(exclude_none=True))
            session.add(category)
            session.flush()
            created = category.as_dict()
        LOGGER.info("category created category_id=%s", created["category_id"])
        return created

    def update_category(self, category_id: int, payload: CategoryUpdate) -> dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with guarded_session(self.db, messages=CATEGORY_ERROR_MESSAGES) as session:
            category = self._load(session, category_id)
            for field_name, value in changes.items():
                setattr(category, field_name, value)
            session.flush()
            updated = category.as_dict()
        LOGGER.info("category updated category_id=%s fields=%s", category_id, sorted(changes))
        return updated

    def delete_category(self, category_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            category = self._load(session, category_id)
            if count_references(session, Book.category_id, category_id):
                raise reference_constraint(
                    "The category cannot be deleted while books reference it."
                )
            deleted = category.as_dict()
            session.delete(category)
        LOGGER.info("category deleted category_id=%s", category_id)
        return deleted

    @staticmethod
    def _load(session: Session, category_id: int) -> Category:
        category = session.get(Category, category_id)
        if category is None:
            raise not_found("Category", category_id)
        return category
