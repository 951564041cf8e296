# This file implements the inventory service: per-book stock counters and unit movements.
# It exists so purchases, lending, and returns always go through the model's bookkeeping rules.
# Unit errors raised by the model are translated into stable API error codes here.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.db_errors import DUPLICATE_RECORD
from src.api.error_handlers import APIError, not_found, reference_not_found
from src.api.pagination import SortSpec
from src.api.schemas.inventory_schemas import InventoryCreate
from src.api.services.query_helpers import count_rows, fetch_page, guarded_session, order_by_columns
from src.models import (
    Book,
    Inventory,
    InventoryUnitsError,
    NothingToReturnError,
    NoUnitsAvailableError,
)

LOGGER = logging.getLogger("api.services.inventories")

INVENTORY_SORT_FIELD_MAP = {
    "inventory_id": Inventory.inventory_id,
    "book_id": Inventory.book_id,
    "units_available": Inventory.units_available,
}
DEFAULT_INVENTORY_SORT = "inventory_id:asc"
INVENTORY_ERROR_MESSAGES = {DUPLICATE_RECORD: "This book already has an inventory record."}


def units_error(exc: InventoryUnitsError) -> APIError:
    """Map a model-level unit error onto its API error code."""

    if isinstance(exc, NoUnitsAvailableError):
        error_code = "NO_UNITS_AVAILABLE"
    elif isinstance(exc, NothingToReturnError):
        error_code = "NOTHING_TO_RETURN"
    else:
        error_code = "INVENTORY_UNITS_INVALID"
    return APIError(status_code=400, error_code=error_code, message=str(exc))


def lock_inventory_for_book(session: Session, book_id: int) -> Inventory | None:
    """Load a book's inventory row with a row lock where the backend supports it."""

    statement = select(Inventory).where(Inventory.book_id == book_id).with_for_update()
    return session.scalars(statement).first()


class InventoryService:
    """Stock bookkeeping for books."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def list_inventories(self, *, page: int, page_size: int, sort: SortSpec) -> dict[str, Any]:
        statement = select(Inventory).order_by(
            *order_by_columns(
                sort=sort,
                field_map=INVENTORY_SORT_FIELD_MAP,
                tie_breaker=Inventory.inventory_id,
            )
        )
        with guarded_session(self.db) as session:
            total_count = count_rows(session, statement)
            rows = [
                inventory.as_dict()
                for inventory in fetch_page(session, statement, page=page, page_size=page_size)
            ]
        return {"rows": rows, "total_count": total_count, "warnings": None}

    def get_inventory(self, inventory_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            return self._load(session, inventory_id).as_dict()

    def get_inventory_for_book(self, book_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            inventory = session.scalars(
                select(Inventory).where(Inventory.book_id == book_id)
            ).first()
            if inventory is None:
                raise APIError(
                    status_code=404,
                    error_code="NOT_FOUND",
                    message=f"Book with id {book_id} has no inventory record.",
                )
            return inventory.as_dict()

    def create_inventory(self, payload: InventoryCreate) -> dict[str, Any]:
        with guarded_session(self.db, messages=INVENTORY_ERROR_MESSAGES) as session:
            if session.get(Book, payload.book_id) is None:
                raise reference_not_found("Book", payload.book_id)
            existing = session.scalars(
                select(Inventory.inventory_id).where(Inventory.book_id == payload.book_id)
            ).first()
            if existing is not None:
                raise APIError(
                    status_code=400,
                    error_code=DUPLICATE_RECORD,
                    message=INVENTORY_ERROR_MESSAGES[DUPLICATE_RECORD],
                    details={"inventory_id": existing},
                )
            inventory = Inventory(book_id=payload.book_id, units_purchased=payload.units_purchased)
            session.add(inventory)
            session.flush()
            created = inventory.as_dict()
        LOGGER.info(
            "inventory created inventory_id=%s book_id=%s units_purchased=%s",
            created["inventory_id"],
            created["book_id"],
            created["units_purchased"],
        )
        return created

    def purchase_units(self, inventory_id: int, units: int) -> dict[str, Any]:
        return self._move_units(inventory_id, units, action="purchase")

    def lend_units(self, inventory_id: int, units: int) -> dict[str, Any]:
        return self._move_units(inventory_id, units, action="loan")

    def return_units(self, inventory_id: int, units: int) -> dict[str, Any]:
        return self._move_units(inventory_id, units, action="return")

    def delete_inventory(self, inventory_id: int) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            inventory = self._load(session, inventory_id, lock=True)
            if inventory.units_loaned > 0:
                raise APIError(
                    status_code=400,
                    error_code="INVENTORY_IN_USE",
                    message=(
                        f"The inventory still has {inventory.units_loaned} unit(s) on loan "
                        "and cannot be deleted."
                    ),
                )
            deleted = inventory.as_dict()
            session.delete(inventory)
        LOGGER.info("inventory deleted inventory_id=%s", inventory_id)
        return deleted

    def _move_units(self, inventory_id: int, units: int, *, action: str) -> dict[str, Any]:
        with guarded_session(self.db) as session:
            inventory = self._load(session, inventory_id, lock=True)
            try:
                if action == "purchase":
                    inventory.add_purchase(units)
                elif action == "loan":
                    inventory.lend(units)
                else:
                    inventory.take_return(units)
            except InventoryUnitsError as exc:
                LOGGER.warning(
                    "inventory %s rejected inventory_id=%s units=%s reason=%s",
                    action,
                    inventory_id,
                    units,
                    exc,
                )
                raise units_error(exc) from exc
            session.flush()
            updated = inventory.as_dict()
        LOGGER.info(
            "inventory %s inventory_id=%s units=%s available=%s",
            action,
            inventory_id,
            units,
            updated["units_available"],
        )
        return updated

    @staticmethod
    def _load(session: Session, inventory_id: int, *, lock: bool = False) -> Inventory:
        if lock:
            statement = (
                select(Inventory)
                .where(Inventory.inventory_id == inventory_id)
                .with_for_update()
            )
            inventory = session.scalars(statement).first()
        else:
            inventory = session.get(Inventory, inventory_id)
        if inventory is None:
            raise not_found("Inventory", inventory_id)
        return inventory
