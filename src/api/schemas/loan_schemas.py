# This file defines request and response contracts for loan endpoints.
# List rows nest compact user, book, and inventory snapshots so clients can render a loan desk without extra calls.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.api.schemas.book_schemas import BookRow
from src.api.schemas.common import EnvelopeFields, PaginationMetadata
from src.api.schemas.inventory_schemas import InventoryRow
from src.api.schemas.user_schemas import UserRow
from src.models.enums import LoanState


class LoanCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: int
    book_id: int
    quantity: int = Field(default=1, ge=1)
    observations: str | None = None
    return_date: datetime | None = None


class LoanUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    observations: str | None = None
    return_date: datetime | None = None


class LoanRow(BaseModel):
    loan_id: int
    user_id: int
    book_id: int
    quantity: int
    observations: str
    loan_date: datetime
    return_date: datetime
    returned_at: datetime | None = None
    state: LoanState


class LoanUserSummary(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    identification: str


class LoanBookSummary(BaseModel):
    book_id: int
    name: str


class LoanInventorySummary(BaseModel):
    units_purchased: int
    units_loaned: int
    units_available: int


class LoanSummaryRow(BaseModel):
    loan_id: int
    state: LoanState
    quantity: int
    loan_date: datetime
    return_date: datetime
    returned_at: datetime | None = None
    user: LoanUserSummary
    book: LoanBookSummary
    inventory: LoanInventorySummary | None = None


class LoanDetail(BaseModel):
    loan: LoanRow
    user: UserRow
    book: BookRow
    inventory: InventoryRow | None = None


class LoanListResponseV1(EnvelopeFields):
    data: list[LoanSummaryRow]
    pagination: PaginationMetadata


class LoanResponseV1(EnvelopeFields):
    data: LoanDetail


class LoanRowResponseV1(EnvelopeFields):
    data: LoanRow
