# This file implements the library user service.
# It exists so member records stay unique by identification and e-mail.
# Users with loan history cannot be deleted.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.db_errors import DUPLICATE_RECORD
from src.api.error_handlers import APIError, not_found
from src.api.pagination import SortSpec
from src.api.schemas.user_schemas import UserCreate, UserUpdate
from src.api.services.query_helpers import (
    count_references,
    count_rows,
    fetch_page,
    guarded_session,
    order_by_columns,
    reference_constraint,
)
from src.models import Loan, RecordStatus, User

LOGGER = logging.getLogger("api.services.users")

USER_SORT_FIELD_MAP = {
    "user_id": User.user_id,
    "last_name": User.last_name,
    "identification": User.identification,
}
DEFAULT_USER_SORT = "user_id:asc"
USER_ERROR_MESSAGES = {
    DUPLICATE_RECORD: "A user with that identification or e-mail already exists.",
}


class UserService:
    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_users(
        self,
        *,
        status: RecordStatus | None,
        page: int,
        page_size: int,
        sort: SortSpec,
    ) -> dict[str, Any]:
        statement = select(User)
        if status is not None:
            statement = statement.where(User.status == status)
        statement = statement.order_by(
            *order_by_columns(sort=sort, field_map=USER_SORT_FIELD_MAP, tie_breaker=User.user_id)
        )
        with guarded_session(self.db) as session:
            total_count = count_rows(session, statement)
            rows = [
                user.as_dict()
                for user in fetch_page(session, statement, page=page, page_size=page_size)
            ]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_user(self, user_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            return self._load(session, user_id).as_dict()

    def get_user_by_identification(self, identification: str) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            user = session.scalars(
                select(User).where(User.identification == identification.strip())
            ).first()
            if user is None:
                raise APIError(
                    status_code=404,
                    error_code="NOT_FOUND",
                    message=f"User with identification {identification} does not exist.",
                )
            return user.as_dict()

    def create_user(self, payload: UserCreate) -> dict[str, Any]:
        with guarded_session(self.db, messages=USER_ERROR_MESSAGES) as session:
            user = User(**payload.model_dump(exclude_none=True))
            session.add(user)
            session.flush()
            created = user.as_dict()
        LOGGER.info("user created user_id=%s", created["user_id"])
        return created

    def update_user(self, user_id: int, payload: UserUpdate) -> dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with guarded_session(self.db, messages=USER_ERROR_MESSAGES) as session:
            user = self._load(session, user_id)
            for field_name, value in changes.items():
                setattr(user, field_name, value)
            session.flush()
            updated = user.as_dict()
        LOGGER.info("user updated user_id=%s fields=%s", user_id, sorted(changes))
        return updated

    def delete_user(self, user_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            user = self._load(session, user_id)
            if count_references(session, Loan.user_id, user_id):
                raise reference_constraint("The user cannot be deleted while loans reference it.")
            deleted = user.as_dict()
            session.delete(user)
        LOGGER.info("user deleted user_id=%s", user_id)
        return deleted

    @staticmethod
    def _load(session: Session, user_id: int) -> User:
        user = session.get(User, user_id)
        if user is None:
            raise not_found("User", user_id)
        return user
