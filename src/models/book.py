from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.common.db import Base
from src.models.enums import BookStatus, enum_column

if TYPE_CHECKING:
    from src.models.author import Author
    from src.models.category import Category
    from src.models.editorial import Editorial
    from src.models.inventory import Inventory
    from src.models.loan import Loan


class Book(Base):
    __tablename__ = "books"

    book_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    place_of_edition: Mapped[str] = mapped_column(String(255), nullable=False)
    year_of_edition: Mapped[int] = mapped_column(Integer, nullable=False)
    num_pages: Mapped[int] = mapped_column(Integer, nullable=False)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="No description")
    status: Mapped[BookStatus] = mapped_column(
        enum_column(BookStatus, name="book_status"),
        nullable=False,
        default=BookStatus.AVAILABLE,
    )
    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("categories.category_id"), nullable=True, index=True
    )
    editorial_id: Mapped[int | None] = mapped_column(
        ForeignKey("editorials.editorial_id"), nullable=True, index=True
    )
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("authors.author_id"), nullable=True, index=True
    )

    category: Mapped[Category | None] = relationship(back_populates="books")
    editorial: Mapped[Editorial | None] = relationship(back_populates="books")
    author: Mapped[Author | None] = relationship(back_populates="books")
    inventory: Mapped[Inventory | None] = relationship(back_populates="book", uselist=False)
    loans: Mapped[list[Loan]] = relationship(back_populates="book")
