from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.common.db import Base
from src.models.enums import RecordStatus, enum_column

if TYPE_CHECKING:
    from src.models.book import Book


class Editorial(Base):
    """A publishing house."""

    __tablename__ = "editorials"

    editorial_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="No description")
    status: Mapped[RecordStatus] = mapped_column(
        enum_column(RecordStatus, name="editorial_status"),
        nullable=False,
        default=RecordStatus.ACTIVE,
    )

    books: Mapped[list[Book]] = relationship(back_populates="editorial")
