"""Enumerated column values shared by the library entities."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Enum as SAEnum


class RecordStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class BookStatus(str, Enum):
    AVAILABLE = "available"
    LOANED = "loaned"
    UNAVAILABLE = "unavailable"


class LoanState(str, Enum):
    LOANED = "loaned"
    RETURNED = "returned"


def enum_column(enum_cls: type[Enum], *, name: str) -> SAEnum:
    """Store enum values (not member names) behind a CHECK constraint."""

    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        validate_strings=True,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )
