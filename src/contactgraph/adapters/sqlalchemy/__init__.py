"""SQLAlchemy adapter package for contactgraph."""

from __future__ import annotations

from .mappings import contact_table, mapper_registry, start_mappers
from .repositories import SqlAlchemyContactRepository
from .unit_of_work import (
    SqlAlchemyContactUnitOfWork,
    StartupError,
    configured_engine,
    create_store_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyContactRepository",
    "SqlAlchemyContactUnitOfWork",
    "StartupError",
    "configured_engine",
    "contact_table",
    "create_store_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
