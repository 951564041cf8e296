# This file defines request and response contracts for author endpoints.
# It exists so name and e-mail rules are enforced before any database work starts.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, ValidationInfo, field_validator

from src.api.schemas.common import EnvelopeFields, PaginationMetadata, check_min_length, lower_email


class AuthorCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    email: EmailStr | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, value: str | None, info: ValidationInfo) -> str | None:
        return check_min_length(value, field_name=info.field_name)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return lower_email(value)


class AuthorUpdate(AuthorCreate):
    first_name: str | None = None
    last_name: str | None = None


class AuthorRow(BaseModel):
    author_id: int
    first_name: str
    last_name: str
    email: str | None = None


class AuthorListResponseV1(EnvelopeFields):
    data: list[AuthorRow]
    pagination: PaginationMetadata


class AuthorResponseV1(EnvelopeFields):
    data: AuthorRow
