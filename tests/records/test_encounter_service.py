from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from services.records.encounters import EncounterService  # noqa: E402
from shared.http.errors import (  # noqa: E402
    DATABASE_UNAVAILABLE_MESSAGE,
    NotFoundError,
    ServiceUnavailableError,
)
from shared.models import Encounter  # noqa: E402


def _encounter(encounter_id: int | None = None, **overrides: Any) -> Encounter:
    values: dict[str, Any] = {
        "id": encounter_id,
        "patient_id": encounter_id or 2,
        "notes": "new note",
        "visit_code": "N3W 3C3",
        "provider": "new provider",
        "billing_code": "123.456.789-00",
        "icd10": "Z99",
        "total_cost": Decimal("150.30"),
        "copay": Decimal("10.10"),
        "chief_complaint": "Pain",
        "pulse": 110,
        "systolic": 60,
        "diastolic": 90,
        "date": "2020-03-15",
    }
    values.update(overrides)
    return Encounter(**values)


class _SilentLogger:
    def info(self, *args: Any, **kwargs: Any) -> None:
        return None

    def warning(self, *args: Any, **kwargs: Any) -> None:
        return None

    def error(self, *args: Any, **kwargs: Any) -> None:
        return None


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(repository: AsyncMock) -> EncounterService:
    return EncounterService(repository, _SilentLogger())


@pytest.mark.anyio("asyncio")
async def test_list_all_returns_all_encounters(
    service: EncounterService, repository: AsyncMock
) -> None:
    encounters = [_encounter(1), _encounter(2)]
    repository.list_all.return_value = encounters

    actual = await service.list_all()

    assert actual is encounters
    assert actual == encounters


@pytest.mark.anyio("asyncio")
async def test_list_all_database_error_raises_service_unavailable(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.list_all.side_effect = ServiceUnavailableError()

    with pytest.raises(ServiceUnavailableError) as excinfo:
        await service.list_all()

    assert str(excinfo.value) == DATABASE_UNAVAILABLE_MESSAGE


@pytest.mark.anyio("asyncio")
async def test_get_by_id_returns_encounter(
    service: EncounterService, repository: AsyncMock
) -> None:
    encounter = _encounter(1)
    repository.get_by_id.return_value = encounter

    actual = await service.get_by_id(1)

    assert actual is encounter
    assert actual.id == 1


@pytest.mark.anyio("asyncio")
async def test_get_by_id_database_error_raises_service_unavailable(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.get_by_id.side_effect = RuntimeError("socket closed")

    with pytest.raises(ServiceUnavailableError) as excinfo:
        await service.get_by_id(1)

    assert str(excinfo.value) == DATABASE_UNAVAILABLE_MESSAGE


@pytest.mark.anyio("asyncio")
async def test_get_by_id_missing_encounter_raises_not_found(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.get_by_id.return_value = None

    with pytest.raises(NotFoundError) as excinfo:
        await service.get_by_id(2)

    assert str(excinfo.value) == "Encounter with id: 2 could not be found."


@pytest.mark.anyio("asyncio")
async def test_create_persists_without_duplicate_check(
    service: EncounterService, repository: AsyncMock
) -> None:
    new_encounter = _encounter()
    saved = _encounter(5)
    repository.create.return_value = saved

    actual = await service.create(new_encounter)

    assert actual is saved
    repository.create.assert_awaited_once_with(new_encounter)
    repository.get_by_id.assert_not_awaited()


@pytest.mark.anyio("asyncio")
async def test_create_database_error_raises_service_unavailable(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.create.side_effect = RuntimeError(DATABASE_UNAVAILABLE_MESSAGE)

    with pytest.raises(ServiceUnavailableError):
        await service.create(_encounter())


@pytest.mark.anyio("asyncio")
async def test_update_changes_icd10_and_returns_repository_result(
    service: EncounterService, repository: AsyncMock
) -> None:
    existing = _encounter(1)
    updated = _encounter(1, icd10="A44")
    repository.get_by_id.return_value = existing
    repository.update.return_value = updated

    actual = await service.update(1, updated)

    assert actual is updated
    assert actual.icd10 == "A44"
    assert actual.model_dump(exclude={"icd10"}) == existing.model_dump(exclude={"icd10"})


@pytest.mark.anyio("asyncio")
async def test_update_missing_encounter_raises_not_found_and_skips_write(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.get_by_id.return_value = None

    with pytest.raises(NotFoundError) as excinfo:
        await service.update(2, _encounter(2))

    assert "2" in str(excinfo.value)
    repository.update.assert_not_awaited()


@pytest.mark.anyio("asyncio")
async def test_update_lookup_error_raises_service_unavailable(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.get_by_id.side_effect = RuntimeError(DATABASE_UNAVAILABLE_MESSAGE)

    with pytest.raises(ServiceUnavailableError):
        await service.get_by_id(1)
    with pytest.raises(ServiceUnavailableError):
        await service.update(1, _encounter(2))

    repository.update.assert_not_awaited()


@pytest.mark.anyio("asyncio")
async def test_update_write_error_raises_service_unavailable(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.get_by_id.return_value = _encounter(1)
    repository.update.side_effect = RuntimeError(DATABASE_UNAVAILABLE_MESSAGE)

    with pytest.raises(ServiceUnavailableError):
        await service.update(1, _encounter(1))


@pytest.mark.anyio("asyncio")
async def test_update_passes_through_repository_not_found(
    service: EncounterService, repository: AsyncMock
) -> None:
    repository.get_by_id.return_value = _encounter(1)
    repository.update.side_effect = NotFoundError("Encounter", 1)

    with pytest.raises(NotFoundError):
        await service.update(1, _encounter(1))


def test_encounter_service_has_no_delete() -> None:
    assert not hasattr(EncounterService, "delete_by_id")
