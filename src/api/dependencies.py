# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the database client and services are created once and shared through dependency injection.
# The setup keeps routers thin and makes endpoint tests easy to override.

from __future__ import annotations

from functools import lru_cache

from src.api.api_config import ApiConfig, get_api_config
from src.api.db_access import DatabaseClient
from src.api.services.author_service import AuthorService
from src.api.services.book_service import BookService
from src.api.services.category_service import CategoryService
from src.api.services.editorial_service import EditorialService
from src.api.services.inventory_service import InventoryService
from src.api.services.loan_service import LoanService
from src.api.services.user_service import UserService


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url, echo=config.sql_echo)


@lru_cache(maxsize=1)
def get_author_service() -> AuthorService:
    return AuthorService(config=get_api_config(), db=get_database_client())


@lru_cache(maxsize=1)
def get_category_service() -> CategoryService:
    return CategoryService(config=get_api_config(), db=get_database_client())


@lru_cache(maxsize=1)
def get_editorial_service() -> EditorialService:
    return EditorialService(config=get_api_config(), db=get_database_client())


@lru_cache(maxsize=1)
def get_book_service() -> BookService:
    return BookService(config=get_api_config(), db=get_database_client())


@lru_cache(maxsize=1)
def get_inventory_service() -> InventoryService:
    return InventoryService(config=get_api_config(), db=get_database_client())


@lru_cache(maxsize=1)
def get_user_service() -> UserService:
    return UserService(config=get_api_config(), db=get_database_client())


@lru_cache(maxsize=1)
def get_loan_service() -> LoanService:
    return LoanService(config=get_api_config(), db=get_database_client())


def get_config() -> ApiConfig:
    return get_api_config()
