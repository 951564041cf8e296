from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.common.db import Base
from src.models.enums import RecordStatus, enum_column

if TYPE_CHECKING:
    from src.models.loan import Loan


class User(Base):
    """A library member who can borrow books."""

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    identification: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    observations: Mapped[str] = mapped_column(String(1000), nullable=False, default="No observations")
    status: Mapped[RecordStatus] = mapped_column(
        enum_column(RecordStatus, name="user_status"),
        nullable=False,
        default=RecordStatus.ACTIVE,
    )

    loans: Mapped[list[Loan]] = relationship(back_populates="user")
