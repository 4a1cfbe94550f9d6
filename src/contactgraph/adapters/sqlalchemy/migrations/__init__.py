"""Alembic migrations for the contact store.

The scripts ship inside the package, so the schema can be brought to head
from an installed distribution without an ``alembic.ini``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from contactgraph.config import get_database_uri

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def build_alembic_config(database_uri: str | None = None) -> Config:
    """Return an Alembic config pointing at the packaged migration scripts."""

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the contact schema to the latest revision.

    With ``engine`` the upgrade runs inside one of its transactions; otherwise
    Alembic connects to ``database_uri`` or the configured database.
    """

    if engine is None:
        command.upgrade(build_alembic_config(database_uri or get_database_uri()), "head")
        return

    config = build_alembic_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
