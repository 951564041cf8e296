from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.common.db import Base
from src.models.enums import LoanState, enum_column

if TYPE_CHECKING:
    from src.models.book import Book
    from src.models.user import User


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class Loan(Base):
    __tablename__ = "loans"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_loans_quantity_positive"),)

    loan_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False, index=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.book_id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    observations: Mapped[str] = mapped_column(String(1000), nullable=False, default="No observations")
    loan_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utc_now)
    return_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    returned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    state: Mapped[LoanState] = mapped_column(
        enum_column(LoanState, name="loan_state"),
        nullable=False,
        default=LoanState.LOANED,
    )

    user: Mapped[User] = relationship(back_populates="loans")
    book: Mapped[Book] = relationship(back_populates="loans")
