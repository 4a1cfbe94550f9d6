"""Where the contact store lives and how its engine isolates transactions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "contactgraph"
DEFAULT_DB_FILENAME: Final[str] = "contactgraph.db"
DEFAULT_ISOLATION_LEVEL: Final[str] = "SERIALIZABLE"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local data directory holding the default SQLite database."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, ensure: bool = True) -> Path:
        data_dir = self.resolve_data_dir()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    # ignored by SQLite, which serializes writers with BEGIN IMMEDIATE
    isolation_level: str = DEFAULT_ISOLATION_LEVEL

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")


def _platform_data_home() -> Path:
    if os.name == "nt":
        local_app_data = optional_env_var("LOCALAPPDATA")
        return Path(local_app_data) if local_app_data else Path.home() / "AppData" / "Local"
    xdg_data_home = optional_env_var("XDG_DATA_HOME")
    return Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = optional_env_var("CONTACTGRAPH_DATA_DIR")
    return StorageConfig(data_dir=Path(override) if override else _platform_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Resolve ``DATABASE_URI``, falling back to the SQLite file in the data directory."""

    isolation_level = optional_env_var("CONTACTGRAPH_ISOLATION_LEVEL") or DEFAULT_ISOLATION_LEVEL
    uri = optional_env_var("DATABASE_URI") or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, isolation_level=isolation_level.upper())


def get_database_uri() -> str:
    return get_database_config().uri
