# This file holds the request-to-envelope plumbing shared by entity routers.
# It exists so every list endpoint validates paging and sorting the same way.
# Invalid paging or sort input is reported as INVALID_QUERY_PARAM.

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi import Request

from src.api.api_config import ApiConfig
from src.api.error_handlers import APIError
from src.api.pagination import PageRequest, SortSpec, page_request, parse_sort
from src.api.response_envelope import envelope


def resolve_list_query(
    *,
    config: ApiConfig,
    page: int,
    page_size: int | None,
    limit: int | None,
    sort: str | None,
    default_sort: str,
    sort_fields: Iterable[str],
) -> tuple[PageRequest, SortSpec]:
    try:
        pagination = page_request(
            page=page,
            page_size=page_size,
            limit=limit,
            default_size=config.default_page_size,
            max_size=config.max_page_size,
        )
        sort_spec = parse_sort(sort, default=default_sort, fields=sort_fields)
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_QUERY_PARAM",
            message=str(exc),
        ) from exc
    return pagination, sort_spec


def list_response(
    *,
    request: Request,
    config: ApiConfig,
    pagination: PageRequest,
    sort_spec: SortSpec,
    service_result: dict[str, Any],
) -> dict[str, Any]:
    return envelope(
        config,
        request_id=request.state.request_id,
        data=list(service_result["rows"]),
        pagination=pagination.metadata(
            total_count=int(service_result["total_count"]),
            sort=sort_spec,
        ),
        warnings=service_result.get("warnings"),
    )


def object_response(
    *,
    request: Request,
    config: ApiConfig,
    data: dict[str, Any],
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    return envelope(config, request_id=request.state.request_id, data=data, warnings=warnings)
