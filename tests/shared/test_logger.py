"""Tests for the shared observability logging helpers."""

from __future__ import annotations

import logging
import sys
import types
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest
import structlog

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shared.observability import logger as logger_module  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_context() -> Iterator[None]:
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


def test_request_context_binds_and_unbinds_request_id() -> None:
    assert logger_module.get_request_id() is None

    with logger_module.request_context("req-1", patient_id=4) as rid:
        assert rid == "req-1"
        assert logger_module.get_request_id() == "req-1"
        context = structlog.contextvars.get_contextvars()
        assert context["request_id"] == "req-1"
        assert context["patient_id"] == 4

    assert logger_module.get_request_id() is None
    assert "request_id" not in structlog.contextvars.get_contextvars()
    assert "patient_id" not in structlog.contextvars.get_contextvars()


def test_request_context_generates_identifier_when_missing() -> None:
    with logger_module.request_context() as rid:
        assert len(rid) == 32
        assert logger_module.get_request_id() == rid


def test_request_context_restores_existing_values() -> None:
    structlog.contextvars.bind_contextvars(request_id="outer", custom="value")

    with logger_module.request_context("inner"):
        assert structlog.contextvars.get_contextvars()["request_id"] == "inner"

    context = structlog.contextvars.get_contextvars()
    assert context["request_id"] == "outer"
    assert context["custom"] == "value"


def test_configure_logging_binds_service_name() -> None:
    logger_module.configure_logging(service_name="records-test", level="warning")

    assert structlog.contextvars.get_contextvars()["service"] == "records-test"


def test_coerce_level_accepts_names_and_numbers() -> None:
    assert logger_module._coerce_level("debug") == (logging.DEBUG, "DEBUG")
    assert logger_module._coerce_level(logging.ERROR) == (logging.ERROR, "ERROR")
    with pytest.raises(ValueError):
        logger_module._coerce_level("loud")


def test_format_record_escapes_braces() -> None:
    record = {
        "time": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "level": types.SimpleNamespace(name="INFO"),
        "extra": {"service": "records", "request_id": "abc"},
        "message": '{"event": "patient_created"}',
    }

    line = logger_module._format_record(record)

    assert "| records | abc |" in line
    assert '{{"event": "patient_created"}}' in line
