# This file tests page and sort parsing, and the pagination block of list envelopes.
# Endpoint tests use a capturing fake service so only the router plumbing is exercised.

from __future__ import annotations

import pytest

from src.api.pagination import PageRequest, SortSpec, page_request, parse_sort
from tests.api.support import FakeDBClient, api_test_client, build_test_config


class CapturingAuthorService:
    def __init__(self) -> None:
        self.last_kwargs: dict[str, object] = {}

    def list_authors(self, **kwargs: object) -> dict[str, object]:
        self.last_kwargs = kwargs
        rows = []
        if int(kwargs["page"]) == 2:
            rows = [
                {
                    "author_id": 3,
                    "first_name": "Isabel",
                    "last_name": "Allende",
                    "email": "No email",
                }
            ]
        return {"rows": rows, "total_count": 3, "warnings": None}


def test_page_request_and_sort_helpers() -> None:
    pagination = page_request(page=2, page_size=2, limit=None, default_size=10, max_size=100)
    sort = parse_sort("last_name:desc", default="author_id:asc", fields={"author_id", "last_name"})

    assert pagination == PageRequest(page=2, size=2)
    assert pagination.offset == 2
    assert sort == SortSpec(field="last_name", descending=True)
    assert str(sort) == "last_name:desc"


def test_limit_takes_precedence_over_page_size() -> None:
    pagination = page_request(page=1, page_size=4, limit=3, default_size=10, max_size=100)
    assert pagination.size == 3


def test_missing_sizes_fall_back_to_default() -> None:
    assert page_request(page=1, page_size=None, limit=None, default_size=7, max_size=100).size == 7


def test_sort_without_order_defaults_to_ascending() -> None:
    sort = parse_sort("Name", default="book_id:asc", fields=["name"])
    assert str(sort) == "name:asc"
    assert str(parse_sort(None, default="name:desc", fields=["name"])) == "name:desc"


@pytest.mark.parametrize(
    ("requested", "message"),
    [
        ("title:asc", "Unsupported sort field"),
        ("name:sideways", "sort order must be"),
    ],
)
def test_parse_sort_rejects_bad_input(requested: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_sort(requested, default="name:asc", fields={"name"})


@pytest.mark.parametrize(("page", "size"), [(0, 5), (1, 0), (1, 101)])
def test_page_request_rejects_out_of_range_values(page: int, size: int) -> None:
    with pytest.raises(ValueError):
        page_request(page=page, page_size=size, limit=None, default_size=10, max_size=100)


def test_page_metadata_counts_partial_pages() -> None:
    request = PageRequest(page=1, size=5)
    sort = SortSpec(field="book_id")

    assert request.total_pages(0) == 0
    assert request.total_pages(5) == 1
    assert request.metadata(total_count=6, sort=sort) == {
        "page": 1,
        "page_size": 5,
        "total_count": 6,
        "total_pages": 2,
        "sort": "book_id:asc",
    }


def test_partial_page_pagination_metadata_is_deterministic() -> None:
    fake_service = CapturingAuthorService()
    with api_test_client(
        config=build_test_config(),
        db_client=FakeDBClient(),
        author_service=fake_service,
    ) as client:
        response = client.get("/api/v1/authors?page=2&page_size=2&sort=last_name:asc")

    assert response.status_code == 200
    payload = response.json()
    assert payload["pagination"]["page"] == 2
    assert payload["pagination"]["page_size"] == 2
    assert payload["pagination"]["total_count"] == 3
    assert payload["pagination"]["total_pages"] == 2
    assert payload["pagination"]["sort"] == "last_name:asc"
    assert payload["data"][0]["last_name"] == "Allende"
    assert fake_service.last_kwargs["page"] == 2
    assert fake_service.last_kwargs["page_size"] == 2


def test_default_page_size_and_sort_come_from_config() -> None:
    fake_service = CapturingAuthorService()
    with api_test_client(author_service=fake_service) as client:
        payload = client.get("/api/v1/authors").json()

    assert payload["pagination"]["page_size"] == 2
    assert payload["pagination"]["sort"] == "author_id:asc"


def test_invalid_page_size_returns_400() -> None:
    with api_test_client(
        config=build_test_config(),
        db_client=FakeDBClient(),
        author_service=CapturingAuthorService(),
    ) as client:
        response = client.get("/api/v1/authors?page_size=99")

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_QUERY_PARAM"


def test_invalid_sort_field_returns_400() -> None:
    with api_test_client(author_service=CapturingAuthorService()) as client:
        response = client.get("/api/v1/authors?sort=email:asc")

    assert response.status_code == 400
    payload = response.json()
    assert payload["error_code"] == "INVALID_QUERY_PARAM"
    assert "Supported fields" in payload["message"]


@pytest.mark.parametrize("query", ["page=0", "page_size=0", "limit=0", "page=-1"])
def test_non_positive_paging_values_return_400(query: str) -> None:
    with api_test_client(author_service=CapturingAuthorService()) as client:
        response = client.get(f"/api/v1/authors?{query}")

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_QUERY_PARAM"
