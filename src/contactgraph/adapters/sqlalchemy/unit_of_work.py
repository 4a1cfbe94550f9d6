"""SQLAlchemy-backed unit of work for contact reconciliation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker

from contactgraph.adapters.sqlalchemy.errors import translate_error
from contactgraph.adapters.sqlalchemy.mappings import start_mappers
from contactgraph.adapters.sqlalchemy.migrations import upgrade_head
from contactgraph.adapters.sqlalchemy.repositories import SqlAlchemyContactRepository
from contactgraph.config import DatabaseConfig, get_database_config
from contactgraph.domain.ports.unit_of_work import ContactRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the contact store is used before ``startup()`` or reconfigured implicitly."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.session_factory = (
            None if engine is None else sessionmaker(bind=engine, expire_on_commit=False)
        )

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "Contact store not started. Call contactgraph.adapters.sqlalchemy.startup() "
                "before opening a unit of work."
            )
        return self.session_factory


_STATE = _AdapterState()


def create_store_engine(config: DatabaseConfig | None = None) -> Engine:
    """Create an engine whose transactions serialize concurrent reconciliations.

    SQLite takes the write lock when a transaction begins (``BEGIN IMMEDIATE``);
    other backends run at the configured isolation level.
    """

    resolved = config or get_database_config()
    if resolved.is_sqlite:
        engine = create_engine(resolved.uri, future=True)
        serialize_sqlite_transactions(engine)
        return engine
    return create_engine(resolved.uri, future=True, isolation_level=resolved.isolation_level)


def serialize_sqlite_transactions(engine: Engine) -> None:
    """Let SQLAlchemy own transaction boundaries and open them with ``BEGIN IMMEDIATE``."""

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection: Any, _record: object) -> None:  # noqa: ANN401
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection: Connection) -> None:
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Map the model, migrate the schema and bind the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError("Contact store already started. Pass force=True to reconfigure.")

    if engine is None:
        config = get_database_config()
        if database_uri is not None:
            config = DatabaseConfig(uri=database_uri, isolation_level=config.isolation_level)
        engine = create_store_engine(config)

    start_mappers()
    upgrade_head(engine=engine)
    log.info("Contact store ready at %s", engine.url.render_as_string(hide_password=True))

    _STATE.bind(engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it; ``startup()`` may be called again."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block, exposing a repository collection.

    Leaving the block without ``commit()`` rolls back. Database errors raised
    inside the block or on commit surface as ``ConflictError`` or
    ``StoreUnavailableError``.
    """

    def __init__(self) -> None:
        self.session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        if isinstance(exc_value, DBAPIError):
            raise translate_error(exc_value) from exc_value
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except DBAPIError as exc:
            self.session.rollback()
            raise translate_error(exc) from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active; use it as a context manager")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active; use it as a context manager")
        return self._repositories


class SqlAlchemyContactUnitOfWork(BaseSqlAlchemyUnitOfWork[ContactRepositories]):
    """Unit of work for one reconciliation attempt."""

    def _build_repositories(self, session: Session) -> ContactRepositories:
        return ContactRepositories(contacts=SqlAlchemyContactRepository(session))


if TYPE_CHECKING:
    from contactgraph.domain.ports.unit_of_work import ContactUnitOfWork

    _uow_check: ContactUnitOfWork = SqlAlchemyContactUnitOfWork()
