"""
Per-book stock counters and the unit bookkeeping rules.
Available units are always derived from purchased and loaned units, and a flush hook recomputes
them before every insert and update so no write can leave the counters inconsistent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import CheckConstraint, ForeignKey, Integer, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.common.db import Base

if TYPE_CHECKING:
    from src.models.book import Book

LOGGER = logging.getLogger("library.inventory")


class InventoryUnitsError(ValueError):
    """Raised when inventory counters would become inconsistent."""


class NoUnitsAvailableError(InventoryUnitsError):
    pass


class NothingToReturnError(InventoryUnitsError):
    pass


class Inventory(Base):
    __tablename__ = "inventories"
    __table_args__ = (
        CheckConstraint("units_purchased >= 0", name="ck_inventories_units_purchased"),
        CheckConstraint("units_loaned >= 0", name="ck_inventories_units_loaned"),
        CheckConstraint("units_loaned <= units_purchased", name="ck_inventories_loaned_le_purchased"),
    )

    inventory_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.book_id"), nullable=False, unique=True, index=True
    )
    units_purchased: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    units_loaned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    units_available: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    book: Mapped[Book] = relationship(back_populates="inventory")

    def recompute_available(self) -> None:
        """Derive available units, rejecting counters that cannot be true."""

        if self.units_purchased is None:
            self.units_purchased = 1
        if self.units_loaned is None:
            self.units_loaned = 0

        if self.units_purchased < 0 or self.units_loaned < 0:
            raise InventoryUnitsError("Inventory unit counts cannot be negative.")
        if self.units_loaned > self.units_purchased:
            raise InventoryUnitsError("Cannot loan more units than have been purchased.")

        self.units_available = self.units_purchased - self.units_loaned

    def add_purchase(self, units: int) -> None:
        if units <= 0:
            raise InventoryUnitsError("Purchased units must be greater than 0.")
        self.units_purchased += units
        self.recompute_available()

    def lend(self, units: int) -> None:
        if units <= 0:
            raise InventoryUnitsError("Loaned units must be greater than 0.")
        self.recompute_available()
        if self.units_available == 0:
            raise NoUnitsAvailableError("All units of this book are already on loan.")
        if units > self.units_available:
            raise NoUnitsAvailableError(
                f"Only {self.units_available} unit(s) available, {units} requested."
            )
        self.units_loaned += units
        self.recompute_available()

    def take_return(self, units: int) -> None:
        if units <= 0:
            raise InventoryUnitsError("Returned units must be greater than 0.")
        if units > self.units_loaned:
            raise NothingToReturnError(
                f"Only {self.units_loaned} unit(s) are on loan, cannot return {units}."
            )
        self.units_loaned -= units
        self.recompute_available()


@event.listens_for(Inventory, "before_insert")
@event.listens_for(Inventory, "before_update")
def _recompute_units_before_flush(_: Any, __: Any, target: Inventory) -> None:
    target.recompute_available()
    LOGGER.debug(
        "inventory units recomputed book_id=%s purchased=%s loaned=%s available=%s",
        target.book_id,
        target.units_purchased,
        target.units_loaned,
        target.units_available,
    )
