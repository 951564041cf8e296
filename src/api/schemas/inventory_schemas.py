# This file defines request and response contracts for inventory endpoints.
# Available units are never accepted from clients; they are always derived server-side.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.api.schemas.common import EnvelopeFields, PaginationMetadata


class InventoryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    book_id: int
    units_purchased: int = Field(default=1, ge=0)


class InventoryRow(BaseModel):
    inventory_id: int
    book_id: int
    units_purchased: int
    units_loaned: int
    units_available: int


class InventoryListResponseV1(EnvelopeFields):
    data: list[InventoryRow]
    pagination: PaginationMetadata


class InventoryResponseV1(EnvelopeFields):
    data: InventoryRow
