from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shared.config.settings import (  # noqa: E402
    AppSettings,
    DatabaseSettings,
    Settings,
    get_settings,
)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RECORDS_SERVICE_NAME",
        "SERVICE_NAME",
        "RECORDS_DB_BACKEND",
        "DATABASE_BACKEND",
        "RECORDS_DB_DSN",
        "DATABASE_URL",
        "RECORDS_PORT",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


def test_defaults_use_memory_backend() -> None:
    settings = Settings()

    assert settings.app.service_name == "records"
    assert settings.app.port == 8005
    assert settings.database.backend == "memory"
    assert settings.logging.level == "info"


def test_prefixed_environment_variables_take_effect(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("RECORDS_DB_BACKEND", "postgres")
    monkeypatch.setenv("RECORDS_DB_DSN", "postgresql://u:p@db:5432/records")
    monkeypatch.setenv("RECORDS_PORT", "9000")

    settings = Settings()

    assert settings.database.backend == "postgres"
    assert settings.database.dsn == "postgresql://u:p@db:5432/records"
    assert settings.app.port == 9000


def test_bare_aliases_are_accepted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://bare/records")
    monkeypatch.setenv("SERVICE_NAME", "records-test")

    assert DatabaseSettings().dsn == "postgresql://bare/records"
    assert AppSettings().service_name == "records-test"


def test_unknown_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RECORDS_DB_BACKEND", "sqlite")

    with pytest.raises(ValidationError):
        DatabaseSettings()


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
