# This file defines book catalog endpoints under the versioned API path.
# It exists so clients can register books and browse them with their related records.
# List rows are compact summaries; the detail endpoint nests category, editorial, and author.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_book_service, get_config
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES
from src.api.schemas.book_schemas import (
    BookCreate,
    BookListResponseV1,
    BookResponseV1,
    BookRowResponseV1,
    BookUpdate,
)
from src.api.services.book_service import BOOK_SORT_FIELD_MAP, DEFAULT_BOOK_SORT, BookService
from src.models import BookStatus

router = APIRouter(prefix="/books", tags=["books"], responses=ERROR_RESPONSES)
BookServiceDep = Annotated[BookService, Depends(get_book_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=BookResponseV1, status_code=201)
def create_book(
    request: Request,
    payload: BookCreate,
    service: BookServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_book(payload))


@router.get("", response_model=BookListResponseV1)
def list_books(
    request: Request,
    service: BookServiceDep,
    config: ConfigDep,
    category_id: int | None = Query(default=None),
    author_id: int | None = Query(default=None),
    editorial_id: int | None = Query(default=None),
    status: BookStatus | None = Query(default=None),
    page: int = Query(default=1),
    page_size: int | None = Query(default=None),
    limit: int | None = Query(default=None),
    sort: str | None = Query(default=None),
) -> dict[str, object]:
    pagination, sort_spec = resolve_list_query(
        config=config,
        page=page,
        page_size=page_size,
        limit=limit,
        sort=sort,
        default_sort=DEFAULT_BOOK_SORT,
        sort_fields=BOOK_SORT_FIELD_MAP,
    )
    service_result = service.list_books(
        category_id=category_id,
        author_id=author_id,
        editorial_id=editorial_id,
        status=status,
        page=pagination.page,
        page_size=pagination.size,
        sort=sort_spec,
    )
    return list_response(
        request=request,
        config=config,
        pagination=pagination,
        sort_spec=sort_spec,
        service_result=service_result,
    )


@router.get("/{book_id}", response_model=BookResponseV1)
def get_book(
    request: Request,
    book_id: int,
    service: BookServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_book(book_id))


@router.patch("/{book_id}", response_model=BookResponseV1)
def update_book(
    request: Request,
    book_id: int,
    payload: BookUpdate,
    service: BookServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.update_book(book_id, payload),
    )


@router.delete("/{book_id}", response_model=BookRowResponseV1)
def delete_book(
    request: Request,
    book_id: int,
    service: BookServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.delete_book(book_id))
