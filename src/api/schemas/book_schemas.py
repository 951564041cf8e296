# This file defines request and response contracts for book endpoints.
# It exists so catalog fields are validated up front and list rows stay compact.
# Detail responses nest the related category, editorial, and author records.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from src.api.schemas.author_schemas import AuthorRow
from src.api.schemas.category_schemas import CategoryRow
from src.api.schemas.common import EnvelopeFields, PaginationMetadata, check_min_length
from src.api.schemas.editorial_schemas import EditorialRow
from src.models.enums import BookStatus


class BookCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    place_of_edition: str
    year_of_edition: int
    num_pages: int = Field(gt=0)
    photo_url: str | None = None
    description: str | None = None
    status: BookStatus = BookStatus.AVAILABLE
    category_id: int | None = None
    editorial_id: int | None = None
    author_id: int | None = None

    @field_validator("name", "place_of_edition")
    @classmethod
    def validate_text_fields(cls, value: str | None, info: ValidationInfo) -> str | None:
        return check_min_length(value, field_name=info.field_name)


class BookUpdate(BookCreate):
    name: str | None = None
    place_of_edition: str | None = None
    year_of_edition: int | None = None
    num_pages: int | None = Field(default=None, gt=0)
    status: BookStatus | None = None


class BookRow(BaseModel):
    book_id: int
    name: str
    place_of_edition: str
    year_of_edition: int
    num_pages: int
    photo_url: str | None = None
    description: str
    status: BookStatus
    category_id: int | None = None
    editorial_id: int | None = None
    author_id: int | None = None


class BookSummaryRow(BaseModel):
    book_id: int
    name: str
    num_pages: int
    place_of_edition: str
    status: BookStatus
    category_name: str | None = None
    editorial_name: str | None = None
    author_first_name: str | None = None
    author_last_name: str | None = None


class BookDetail(BaseModel):
    book: BookRow
    category: CategoryRow | None = None
    editorial: EditorialRow | None = None
    author: AuthorRow | None = None


class BookListResponseV1(EnvelopeFields):
    data: list[BookSummaryRow]
    pagination: PaginationMetadata


class BookResponseV1(EnvelopeFields):
    data: BookDetail


class BookRowResponseV1(EnvelopeFields):
    data: BookRow
