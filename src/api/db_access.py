# This file wraps database access so API services share one engine and one transaction pattern.
# It exists to keep session handling out of router code and make testing against SQLite easy.
# `session_scope` is the only place that commits or rolls back, so every write follows the same rules.

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

import src.models  # noqa: F401  (registers every table on Base.metadata)
from src.common.db import Base, build_engine, build_session_factory, can_connect

LOGGER = logging.getLogger("api.db")


class DatabaseClient:
    """Engine plus session factory for the library schema."""

    def __init__(self, *, database_url: str, echo: bool = False) -> None:
        self._engine: Engine = build_engine(database_url, echo=echo)
        self._session_factory: sessionmaker[Session] = build_session_factory(self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def can_connect(self) -> bool:
        return can_connect(self._engine)

    def table_exists(self, table_name: str) -> bool:
        try:
            return inspect(self._engine).has_table(table_name)
        except SQLAlchemyError:
            return False

    def missing_tables(self) -> list[str]:
        return [name for name in sorted(Base.metadata.tables) if not self.table_exists(name)]

    def create_schema(self, *, drop_first: bool = False) -> None:
        if drop_first:
            LOGGER.warning("dropping all library tables")
            Base.metadata.drop_all(self._engine)
        Base.metadata.create_all(self._engine)
        LOGGER.info("library schema ensured tables=%s", len(Base.metadata.tables))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on any error."""

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self._engine.dispose()
