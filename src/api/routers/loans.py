# This file defines loan endpoints under the versioned API path.
# It exists so the loan desk can lend books, take them back, and review loan history.
# Lending and returning move inventory units in the same transaction as the loan record.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_loan_service
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES
from src.api.schemas.loan_schemas import (
    LoanCreate,
    LoanListResponseV1,
    LoanResponseV1,
    LoanRowResponseV1,
    LoanUpdate,
)
from src.api.services.loan_service import DEFAULT_LOAN_SORT, LOAN_SORT_FIELD_MAP, LoanService
from src.models import LoanState

router = APIRouter(prefix="/loans", tags=["loans"], responses=ERROR_RESPONSES)
LoanServiceDep = Annotated[LoanService, Depends(get_loan_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=LoanResponseV1, status_code=201)
def create_loan(
    request: Request,
    payload: LoanCreate,
    service: LoanServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_loan(payload))


@router.get("", response_model=LoanListResponseV1)
def list_loans(
    request: Request,
    service: LoanServiceDep,
    config: ConfigDep,
    state: LoanState | None = Query(default=None),
    user_id: int | None = Query(default=None),
    book_id: int | None = Query(default=None),
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
        default_sort=DEFAULT_LOAN_SORT,
        sort_fields=LOAN_SORT_FIELD_MAP,
    )
    service_result = service.list_loans(
        state=state,
        user_id=user_id,
        book_id=book_id,
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


@router.get("/{loan_id}", response_model=LoanResponseV1)
def get_loan(
    request: Request,
    loan_id: int,
    service: LoanServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_loan(loan_id))


@router.patch("/{loan_id}/return", response_model=LoanResponseV1)
def return_loan(
    request: Request,
    loan_id: int,
    service: LoanServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.return_loan(loan_id))


@router.patch("/{loan_id}", response_model=LoanResponseV1)
def update_loan(
    request: Request,
    loan_id: int,
    payload: LoanUpdate,
    service: LoanServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.update_loan(loan_id, payload),
    )


@router.delete("/{loan_id}", response_model=LoanRowResponseV1)
def delete_loan(
    request: Request,
    loan_id: int,
    service: LoanServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.delete_loan(loan_id))
