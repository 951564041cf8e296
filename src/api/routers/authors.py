# This file defines author endpoints under the versioned API path.
# It exists so clients can maintain the author records that books point at.
# List results use deterministic pagination and allowlisted sorting.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_author_service, get_config
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES
from src.api.schemas.author_schemas import (
    AuthorCreate,
    AuthorListResponseV1,
    AuthorResponseV1,
    AuthorUpdate,
)
from src.api.services.author_service import (
    AUTHOR_SORT_FIELD_MAP,
    DEFAULT_AUTHOR_SORT,
    AuthorService,
)

router = APIRouter(prefix="/authors", tags=["authors"], responses=ERROR_RESPONSES)
AuthorServiceDep = Annotated[AuthorService, Depends(get_author_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=AuthorResponseV1, status_code=201)
def create_author(
    request: Request,
    payload: AuthorCreate,
    service: AuthorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_author(payload))


@router.get("", response_model=AuthorListResponseV1)
def list_authors(
    request: Request,
    service: AuthorServiceDep,
    config: ConfigDep,
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
        default_sort=DEFAULT_AUTHOR_SORT,
        sort_fields=AUTHOR_SORT_FIELD_MAP,
    )
    service_result = service.list_authors(
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


@router.get("/{author_id}", response_model=AuthorResponseV1)
def get_author(
    request: Request,
    author_id: int,
    service: AuthorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_author(author_id))


@router.patch("/{author_id}", response_model=AuthorResponseV1)
def update_author(
    request: Request,
    author_id: int,
    payload: AuthorUpdate,
    service: AuthorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.update_author(author_id, payload),
    )


@router.delete("/{author_id}", response_model=AuthorResponseV1)
def delete_author(
    request: Request,
    author_id: int,
    service: AuthorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.delete_author(author_id))
