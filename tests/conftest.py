from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from contactgraph.adapters.sqlalchemy import start_mappers
from contactgraph.adapters.sqlalchemy.migrations import upgrade_head
from contactgraph.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    create_store_engine,
    shutdown,
    startup,
)
from contactgraph.config import DatabaseConfig
from tests.helpers.contacts import FakeContactRepository, FakeUnitOfWorkFactory

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def contact_repository() -> FakeContactRepository:
    return FakeContactRepository()


@pytest.fixture
def fake_unit_of_work(contact_repository: FakeContactRepository) -> FakeUnitOfWorkFactory:
    return FakeUnitOfWorkFactory(contact_repository)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_store_engine(DatabaseConfig(uri="sqlite+pysqlite:///:memory:"))
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyContactUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyContactUnitOfWork:
        return SqlAlchemyContactUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
