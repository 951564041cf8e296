# This file provides shared helpers for API endpoint tests.
# It exists so tests can swap services and the database client without touching a real server.
# Helpers either inject fakes or wire real services over an in-memory SQLite database.

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from src.api.api_config import ApiConfig
from src.api.app import app
from src.api.db_access import DatabaseClient
from src.api.dependencies import (
    get_author_service,
    get_book_service,
    get_category_service,
    get_config,
    get_database_client,
    get_editorial_service,
    get_inventory_service,
    get_loan_service,
    get_user_service,
)
from src.api.services.author_service import AuthorService
from src.api.services.book_service import BookService
from src.api.services.category_service import CategoryService
from src.api.services.editorial_service import EditorialService
from src.api.services.inventory_service import InventoryService
from src.api.services.loan_service import LoanService
from src.api.services.user_service import UserService

SERVICE_DEPENDENCIES: dict[str, Callable[[], Any]] = {
    "author_service": get_author_service,
    "category_service": get_category_service,
    "editorial_service": get_editorial_service,
    "book_service": get_book_service,
    "inventory_service": get_inventory_service,
    "user_service": get_user_service,
    "loan_service": get_loan_service,
}

SERVICE_CLASSES: dict[str, type[Any]] = {
    "author_service": AuthorService,
    "category_service": CategoryService,
    "editorial_service": EditorialService,
    "book_service": BookService,
    "inventory_service": InventoryService,
    "user_service": UserService,
    "loan_service": LoanService,
}


def build_test_config(**overrides: Any) -> ApiConfig:
    """Create deterministic API config for tests."""

    values: dict[str, Any] = {
        "api_name": "Test Library API",
        "api_version_path": "/api/v1",
        "schema_version": "1.0.0",
        "host": "0.0.0.0",
        "port": 8000,
        "environment": "test",
        "database_url": "sqlite+pysqlite:///:memory:",
        "default_page_size": 2,
        "max_page_size": 5,
        "allowed_origins": [],
        "app_version": "0.1.0",
        "default_loan_days": 15,
    }
    values.update(overrides)
    return ApiConfig(**values)


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, missing_tables: list[str] | None = None) -> None:
        self._connected = connected
        self._missing = list(missing_tables or [])

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name not in self._missing

    def missing_tables(self) -> list[str]:
        return list(self._missing)


def build_services(*, config: ApiConfig, db: DatabaseClient) -> dict[str, Any]:
    """Real services bound to `db`, keyed like `api_test_client` keyword arguments."""

    return {name: service_cls(config=config, db=db) for name, service_cls in SERVICE_CLASSES.items()}


def _provider(value: Any) -> Callable[[], Any]:
    """Zero-argument override; FastAPI would read keyword defaults as query parameters."""

    return lambda: value


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    raise_server_exceptions: bool = True,
    **services: Any,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    unknown = set(services) - set(SERVICE_DEPENDENCIES)
    if unknown:
        raise TypeError(f"Unknown service overrides: {sorted(unknown)}")

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    for name, service in services.items():
        app.dependency_overrides[SERVICE_DEPENDENCIES[name]] = _provider(service)

    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@contextmanager
def library_test_client(
    db: DatabaseClient,
    *,
    config: ApiConfig | None = None,
) -> Iterator[TestClient]:
    """TestClient whose every service runs against `db`."""

    resolved_config = config or build_test_config()
    with api_test_client(
        config=resolved_config,
        db_client=db,
        **build_services(config=resolved_config, db=db),
    ) as client:
        yield client


def create_author(client: TestClient, **overrides: Any) -> dict[str, Any]:
    body = {"first_name": "Gabriel", "last_name": "Garcia Marquez", "email": "gabo@example.com"}
    body.update(overrides)
    response = client.post("/api/v1/authors", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_category(client: TestClient, **overrides: Any) -> dict[str, Any]:
    body = {"name": "Novel", "description": "Long-form fiction"}
    body.update(overrides)
    response = client.post("/api/v1/categories", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_editorial(client: TestClient, **overrides: Any) -> dict[str, Any]:
    body = {"name": "Sudamericana"}
    body.update(overrides)
    response = client.post("/api/v1/editorials", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_book(client: TestClient, **overrides: Any) -> dict[str, Any]:
    body = {
        "name": "One Hundred Years of Solitude",
        "place_of_edition": "Buenos Aires",
        "year_of_edition": 1967,
        "num_pages": 471,
    }
    body.update(overrides)
    response = client.post("/api/v1/books", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]["book"]


def create_inventory(client: TestClient, *, book_id: int, units_purchased: int = 3) -> dict[str, Any]:
    response = client.post(
        "/api/v1/inventories",
        json={"book_id": book_id, "units_purchased": units_purchased},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_user(client: TestClient, **overrides: Any) -> dict[str, Any]:
    body = {
        "first_name": "Laura",
        "last_name": "Restrepo",
        "identification": "1020304050",
        "email": "laura@example.com",
    }
    body.update(overrides)
    response = client.post("/api/v1/users", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]
