# This file implements the editorial (publisher) service.
# It exists so publishers can be listed by status and kept unique by name.

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
from src.api.schemas.editorial_schemas import EditorialCreate, EditorialUpdate
from src.api.services.query_helpers import (
    count_references,
    count_rows,
    fetch_page,
    guarded_session,
    order_by_columns,
    reference_constraint,
)
from src.models import Book, Editorial, RecordStatus

LOGGER = logging.getLogger("api.services.editorials")

EDITORIAL_SORT_FIELD_MAP = {
    "editorial_id": Editorial.editorial_id,
    "name": Editorial.name,
    "status": Editorial.status,
}
DEFAULT_EDITORIAL_SORT = "editorial_id:asc"
EDITORIAL_ERROR_MESSAGES = {DUPLICATE_RECORD: "An editorial with that name already exists."}


class EditorialService:
    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_editorials(
        self,
        *,
        status: RecordStatus | None,
        page: int,
        page_size: int,
        sort: SortSpec,
    ) -> dict[str, Any]:
        statement = select(Editorial)
        if status is not None:
            statement = statement.where(Editorial.status == status)
        statement = statement.order_by(
            *order_by_columns(
                sort=sort, field_map=EDITORIAL_SORT_FIELD_MAP, tie_breaker=Editorial.editorial_id
            )
        )
        with guarded_session(self.db) as session:
            total_count = count_rows(session, statement)
            rows = [
                editorial.as_dict()
                for editorial in fetch_page(session, statement, page=page, page_size=page_size)
            ]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_editorial(self, editorial_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            return self._load(session, editorial_id).as_dict()

    def create_editorial(self, payload: EditorialCreate) -> dict[str, Any]:
        with guarded_session(self.db, messages=EDITORIAL_ERROR_MESSAGES) as session:
            editorial = Editorial(**payload.model_dump(exclude_none=True))
            session.add(editorial)
            session.flush()
            created = editorial.as_dict()
        LOGGER.info("editorial created editorial_id=%s", created["editorial_id"])
        return created

    def update_editorial(self, editorial_id: int, payload: EditorialUpdate) -> dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with guarded_session(self.db, messages=EDITORIAL_ERROR_MESSAGES) as session:
            editorial = self._load(session, editorial_id)
            for field_name, value in changes.items():
                setattr(editorial, field_name, value)
            session.flush()
            updated = editorial.as_dict()
        LOGGER.info("editorial updated editorial_id=%s fields=%s", editorial_id, sorted(changes))
        return updated

    def delete_editorial(self, editorial_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            editorial = self._load(session, editorial_id)
            if count_references(session, Book.editorial_id, editorial_id):
                raise reference_constraint(
                    "The editorial cannot be deleted while books reference it."
                )
            deleted = editorial.as_dict()
            session.delete(editorial)
        LOGGER.info("editorial deleted editorial_id=%s", editorial_id)
        return deleted

    @staticmethod
    def _load(session: Session, editorial_id: int) -> Editorial:
        editorial = session.get(Editorial, editorial_id)
        if editorial is None:
            raise not_found("Editorial", editorial_id)
        return editorial
