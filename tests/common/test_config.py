from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contactgraph.config import (
    ConfigurationError,
    DatabaseConfig,
    get_database_config,
    get_reconciliation_config,
    get_storage_config,
    optional_env_var,
    positive_int_env_var,
)
from contactgraph.domain.reconciliation import DEFAULT_MAX_ATTEMPTS

if TYPE_CHECKING:
    from pathlib import Path


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    assert optional_env_var("EXAMPLE_VAR") is None


def test_optional_env_var_strips_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    assert optional_env_var("EXAMPLE_VAR") == "value"


def test_positive_int_env_var_defaults_when_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_INT", raising=False)

    assert positive_int_env_var("EXAMPLE_INT", 7) == 7


@pytest.mark.parametrize("raw", ["abc", "0", "-2", "1.5"])
def test_positive_int_env_var_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
) -> None:
    monkeypatch.setenv("EXAMPLE_INT", raw)

    with pytest.raises(ConfigurationError) as exc:
        positive_int_env_var("EXAMPLE_INT", 7)

    assert "EXAMPLE_INT" in str(exc.value)


def test_reconciliation_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONTACTGRAPH_RECONCILE_ATTEMPTS", raising=False)

    assert get_reconciliation_config().max_attempts == DEFAULT_MAX_ATTEMPTS


def test_reconciliation_config_reads_attempts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTACTGRAPH_RECONCILE_ATTEMPTS", "5")

    assert get_reconciliation_config().max_attempts == 5


def test_storage_config_uses_env_override(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("CONTACTGRAPH_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "data").resolve()
    assert config.database_path() == (tmp_path / "data" / "contactgraph.db").resolve()
    assert (tmp_path / "data").is_dir()


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("CONTACTGRAPH_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "contactgraph").resolve()


def test_database_config_prefers_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://db/contacts")
    monkeypatch.setenv("CONTACTGRAPH_ISOLATION_LEVEL", "repeatable read")

    config = get_database_config()

    assert config == DatabaseConfig(
        uri="postgresql+psycopg://db/contacts",
        isolation_level="REPEATABLE READ",
    )
    assert not config.is_sqlite


def test_database_config_falls_back_to_storage(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.delenv("CONTACTGRAPH_ISOLATION_LEVEL", raising=False)
    monkeypatch.setenv("CONTACTGRAPH_DATA_DIR", str(tmp_path))

    config = get_database_config()

    assert config.uri == f"sqlite+pysqlite:///{(tmp_path / 'contactgraph.db').resolve()}"
    assert config.isolation_level == "SERIALIZABLE"
    assert config.is_sqlite
