# This file implements the loan desk: lending books to users and taking them back.
# It exists so every unit movement and its loan record are written in the same transaction.
# The inventory row is locked before counters are read, so concurrent loans cannot oversell stock.

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.error_handlers import APIError, not_found, reference_not_found
from src.api.pagination import SortSpec
from src.api.schemas.loan_schemas import LoanCreate, LoanUpdate
from src.api.services.inventory_service import lock_inventory_for_book, units_error
from src.api.services.query_helpers import fetch_row_page, guarded_session, order_by_columns
from src.models import Book, Inventory, InventoryUnitsError, Loan, LoanState, RecordStatus, User

LOGGER = logging.getLogger("api.services.loans")

LOAN_SORT_FIELD_MAP = {
    "loan_id": Loan.loan_id,
    "loan_date": Loan.loan_date,
    "return_date": Loan.return_date,
}
DEFAULT_LOAN_SORT = "loan_id:desc"
LOAN_DATETIME_FIELDS = ("loan_date", "return_date", "returned_at")


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC; some backends drop the offset on read."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def loan_row(loan: Loan) -> dict[str, Any]:
    row = loan.as_dict()
    for field_name in LOAN_DATETIME_FIELDS:
        row[field_name] = as_utc(row[field_name])
    return row


def _inventory_counts(inventory: Inventory | None) -> dict[str, int] | None:
    if inventory is None:
        return None
    return {
        "units_purchased": inventory.units_purchased,
        "units_loaned": inventory.units_loaned,
        "units_available": inventory.units_available,
    }


def loan_summary(loan: Loan, user: User, book: Book, inventory: Inventory | None) -> dict[str, Any]:
    row = loan_row(loan)
    return {
        "loan_id": row["loan_id"],
        "state": row["state"],
        "quantity": row["quantity"],
        "loan_date": row["loan_date"],
        "return_date": row["return_date"],
        "returned_at": row["returned_at"],
        "user": {
            "user_id": user.user_id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "identification": user.identification,
        },
        "book": {"book_id": book.book_id, "name": book.name},
        "inventory": _inventory_counts(inventory),
    }


def loan_detail(loan: Loan, inventory: Inventory | None) -> dict[str, Any]:
    return {
        "loan": loan_row(loan),
        "user": loan.user.as_dict(),
        "book": loan.book.as_dict(),
        "inventory": inventory.as_dict() if inventory is not None else None,
    }


class LoanService:
    """Lend and return books while keeping inventory counters consistent."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_loans(
        self,
        *,
        state: LoanState | None,
        user_id: int | None,
        book_id: int | None,
        page: int,
        page_size: int,
        sort: SortSpec,
    ) -> dict[str, Any]:
        conditions = []
        if state is not None:
            conditions.append(Loan.state == state)
        if user_id is not None:
            conditions.append(Loan.user_id == user_id)
        if book_id is not None:
            conditions.append(Loan.book_id == book_id)

        statement = (
            select(Loan, User, Book, Inventory)
            .join(User, Loan.user_id == User.user_id)
            .join(Book, Loan.book_id == Book.book_id)
            .outerjoin(Inventory, Inventory.book_id == Loan.book_id)
            .where(*conditions)
            .order_by(
                *order_by_columns(
                    sort=sort, field_map=LOAN_SORT_FIELD_MAP, tie_breaker=Loan.loan_id
                )
            )
        )
        count_statement = select(func.count(Loan.loan_id)).where(*conditions)

        with guarded_session(self.db) as session:
            total_count = int(session.execute(count_statement).scalar_one())
            rows = [
                loan_summary(loan, user, book, inventory)
                for loan, user, book, inventory in fetch_row_page(
                    session, statement, page=page, page_size=page_size
                )
            ]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_loan(self, loan_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            loan = self._load(session, loan_id)
            inventory = session.scalars(
                select(Inventory).where(Inventory.book_id == loan.book_id)
            ).first()
            return loan_detail(loan, inventory)

    def create_loan(self, payload: LoanCreate) -> dict[str, Any]:
        now = utc_now()
        return_date = as_utc(payload.return_date) or now + timedelta(
            days=self.config.default_loan_days
        )

        with guarded_session(self.db) as session:
            user = session.get(User, payload.user_id)
            if user is None:
                raise reference_not_found("User", payload.user_id)
            if session.get(Book, payload.book_id) is None:
                raise reference_not_found("Book", payload.book_id)

            inventory = lock_inventory_for_book(session, payload.book_id)
            if inventory is None:
                raise APIError(
                    status_code=400,
                    error_code="INVENTORY_NOT_FOUND",
                    message=f"Book with id {payload.book_id} has no inventory record.",
                )
            if user.status != RecordStatus.ACTIVE:
                raise APIError(
                    status_code=400,
                    error_code="USER_INACTIVE",
                    message="Inactive users cannot borrow books.",
                )
            duplicate_id = session.scalars(
                select(Loan.loan_id).where(
                    Loan.user_id == payload.user_id,
                    Loan.book_id == payload.book_id,
                    Loan.return_date == return_date,
                    Loan.state == LoanState.LOANED,
                )
            ).first()
            if duplicate_id is not None:
                raise APIError(
                    status_code=400,
                    error_code="DUPLICATE_LOAN",
                    message="This user already has an active loan of this book due on that date.",
                    details={"loan_id": duplicate_id},
                )
            self._check_return_date(return_date, now=now)

            try:
                inventory.lend(payload.quantity)
            except InventoryUnitsError as exc:
                LOGGER.warning(
                    "loan rejected user_id=%s book_id=%s quantity=%s reason=%s",
                    payload.user_id,
                    payload.book_id,
                    payload.quantity,
                    exc,
                )
                raise units_error(exc) from exc

            loan = Loan(
                user_id=payload.user_id,
                book_id=payload.book_id,
                quantity=payload.quantity,
                loan_date=now,
                return_date=return_date,
                state=LoanState.LOANED,
            )
            if payload.observations is not None:
                loan.observations = payload.observations
            session.add(loan)
            session.flush()
            detail = loan_detail(loan, inventory)

        LOGGER.info(
            "loan created loan_id=%s user_id=%s book_id=%s quantity=%s available=%s",
            detail["loan"]["loan_id"],
            payload.user_id,
            payload.book_id,
            payload.quantity,
            detail["inventory"]["units_available"],
        )
        return detail

    def return_loan(self, loan_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            loan = self._load(session, loan_id, lock=True)
            self._ensure_active(loan)

            inventory = lock_inventory_for_book(session, loan.book_id)
            if inventory is None:
                raise APIError(
                    status_code=400,
                    error_code="INVENTORY_NOT_FOUND",
                    message=f"Book with id {loan.book_id} has no inventory record.",
                )
            try:
                inventory.take_return(loan.quantity)
            except InventoryUnitsError as exc:
                raise units_error(exc) from exc

            loan.state = LoanState.RETURNED
            loan.returned_at = utc_now()
            session.flush()
            detail = loan_detail(loan, inventory)
        LOGGER.info("loan returned loan_id=%s quantity=%s", loan_id, detail["loan"]["quantity"])
        return detail

    def update_loan(self, loan_id: int, payload: LoanUpdate) -> dict[str, Any]:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with guarded_session(self.db) as session:
            loan = self._load(session, loan_id)
            self._ensure_active(loan)
            if "return_date" in changes:
                changes["return_date"] = as_utc(changes["return_date"])
                self._check_return_date(changes["return_date"], now=utc_now())
            for field_name, value in changes.items():
                setattr(loan, field_name, value)
            session.flush()
            inventory = session.scalars(
                select(Inventory).where(Inventory.book_id == loan.book_id)
            ).first()
            detail = loan_detail(loan, inventory)
        LOGGER.info("loan updated loan_id=%s fields=%s", loan_id, sorted(changes))
        return detail

    def delete_loan(self, loan_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            loan = self._load(session, loan_id)
            if loan.state != LoanState.RETURNED:
                raise APIError(
                    status_code=400,
                    error_code="LOAN_STILL_ACTIVE",
                    message="Only returned loans can be deleted.",
                )
            deleted = loan_row(loan)
            session.delete(loan)
        LOGGER.info("loan deleted loan_id=%s", loan_id)
        return deleted

    @staticmethod
    def _check_return_date(return_date: datetime, *, now: datetime) -> None:
        if return_date < now:
            raise APIError(
                status_code=400,
                error_code="INVALID_RETURN_DATE",
                message="The return date cannot be in the past.",
                details={"return_date": return_date.isoformat()},
            )

    @staticmethod
    def _ensure_active(loan: Loan) -> None:
        if loan.state == LoanState.RETURNED:
            raise APIError(
                status_code=400,
                error_code="LOAN_ALREADY_RETURNED",
                message=f"Loan {loan.loan_id} has already been returned.",
            )

    @staticmethod
    def _load(session: Session, loan_id: int, *, lock: bool = False) -> Loan:
        if lock:
            loan = session.scalars(
                select(Loan).where(Loan.loan_id == loan_id).with_for_update()
            ).first()
        else:
            loan = session.get(Loan, loan_id)
        if loan is None:
            raise not_found("Loan", loan_id)
        return loan
