"""
Unit tests for inventory bookkeeping.
They cover the in-memory rules on `Inventory` and the flush hook that re-derives available units.
"""

from __future__ import annotations

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from src.models import (
    Book,
    Inventory,
    InventoryUnitsError,
    NothingToReturnError,
    NoUnitsAvailableError,
)


def _book(session) -> Book:
    book = Book(name="Pedro Paramo", place_of_edition="Mexico City", year_of_edition=1955, num_pages=124)
    session.add(book)
    session.flush()
    return book


def test_recompute_available_fills_defaults() -> None:
    inventory = Inventory(book_id=1)
    inventory.recompute_available()

    assert inventory.units_purchased == 1
    assert inventory.units_loaned == 0
    assert inventory.units_available == 1


@pytest.mark.parametrize(("purchased", "loaned"), [(2, 3), (-1, 0), (1, -1)])
def test_recompute_available_rejects_impossible_counts(purchased: int, loaned: int) -> None:
    inventory = Inventory(book_id=1, units_purchased=purchased, units_loaned=loaned)
    with pytest.raises(InventoryUnitsError):
        inventory.recompute_available()


def test_lend_and_take_return_keep_invariant() -> None:
    inventory = Inventory(book_id=1, units_purchased=3, units_loaned=0)
    inventory.lend(2)
    assert (inventory.units_loaned, inventory.units_available) == (2, 1)

    inventory.add_purchase(2)
    assert (inventory.units_purchased, inventory.units_available) == (5, 3)

    inventory.take_return(2)
    assert (inventory.units_loaned, inventory.units_available) == (0, 5)


def test_lend_errors_distinguish_empty_and_short_stock() -> None:
    inventory = Inventory(book_id=1, units_purchased=1, units_loaned=1)
    with pytest.raises(NoUnitsAvailableError, match="already on loan"):
        inventory.lend(1)

    inventory = Inventory(book_id=1, units_purchased=3, units_loaned=1)
    with pytest.raises(NoUnitsAvailableError, match="Only 2 unit"):
        inventory.lend(3)
    assert inventory.units_loaned == 1


def test_take_return_rejects_excess() -> None:
    inventory = Inventory(book_id=1, units_purchased=3, units_loaned=1)
    with pytest.raises(NothingToReturnError):
        inventory.take_return(2)


@pytest.mark.parametrize("method", ["add_purchase", "lend", "take_return"])
def test_unit_movements_require_positive_units(method: str) -> None:
    inventory = Inventory(book_id=1, units_purchased=3, units_loaned=1)
    with pytest.raises(InventoryUnitsError):
        getattr(inventory, method)(0)


def test_flush_hook_derives_available_on_insert_and_update(sqlite_db) -> None:
    with sqlite_db.session_scope() as session:
        book = _book(session)
        inventory = Inventory(book_id=book.book_id, units_purchased=4)
        session.add(inventory)
        session.flush()
        assert inventory.units_available == 4

        # Direct counter edits bypass the helper methods; the hook still re-derives availability.
        inventory.units_loaned = 3
        session.flush()
        assert inventory.units_available == 1

    with sqlite_db.session_scope() as session:
        stored = session.scalars(select(Inventory)).one()
        assert stored.units_available == 1


def test_flush_hook_rejects_loaned_above_purchased(sqlite_db) -> None:
    with pytest.raises(InventoryUnitsError):
        with sqlite_db.session_scope() as session:
            book = _book(session)
            session.add(Inventory(book_id=book.book_id, units_purchased=1, units_loaned=2))

    with sqlite_db.session_scope() as session:
        assert session.scalars(select(Inventory)).all() == []
        assert session.scalars(select(Book)).all() == []


def test_check_constraint_guards_raw_sql(sqlite_db) -> None:
    with sqlite_db.session_scope() as session:
        book = _book(session)
        session.add(Inventory(book_id=book.book_id, units_purchased=1))

    with pytest.raises(IntegrityError, match="CHECK constraint failed"):
        with sqlite_db.session_scope() as session:
            session.execute(text("UPDATE inventories SET units_loaned = 5"))


def test_one_inventory_per_book(sqlite_db) -> None:
    with sqlite_db.session_scope() as session:
        book = _book(session)
        session.add(Inventory(book_id=book.book_id))

    with pytest.raises(IntegrityError, match="UNIQUE constraint failed"):
        with sqlite_db.session_scope() as session:
            session.add(Inventory(book_id=book.book_id))
