"""In-memory repositories used for local development and tests."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from shared.http.errors import NotFoundError
from shared.models import Encounter, Patient, RecordModel

RecordT = TypeVar("RecordT", bound=RecordModel)


class _InMemoryRepository(Generic[RecordT]):
    """Dictionary-backed store assigning sequential integer ids.

    Records are copied on the way in and out so callers never share state
    with the store.
    """

    resource = "Record"

    def __init__(self, records: Iterable[RecordT] | None = None) -> None:
        self._records: dict[int, RecordT] = {}
        self._next_id = 1
        for record in records or []:
            if record.is_persisted:
                self._store(record.model_copy(deep=True))
            else:
                self._insert(record)

    def _store(self, record: RecordT) -> None:
        if record.id is None:
            raise ValueError(f"Cannot store {self.resource.lower()} without an id.")
        self._records[record.id] = record
        self._next_id = max(self._next_id, record.id + 1)

    def _insert(self, record: RecordT) -> RecordT:
        stored = record.model_copy(update={"id": self._next_id}, deep=True)
        self._store(stored)
        return stored.model_copy(deep=True)

    async def list_all(self) -> list[RecordT]:
        return [self._records[key].model_copy(deep=True) for key in sorted(self._records)]

    async def get_by_id(self, record_id: int) -> RecordT | None:
        record = self._records.get(record_id)
        if record is None:
            return None
        return record.model_copy(deep=True)

    async def create(self, record: RecordT) -> RecordT:
        return self._insert(record)

    async def update(self, record: RecordT) -> RecordT:
        if record.id is None or record.id not in self._records:
            raise NotFoundError(self.resource, record.id or 0)
        self._records[record.id] = record.model_copy(deep=True)
        return record.model_copy(deep=True)


class InMemoryPatientRepository(_InMemoryRepository[Patient]):
    """Patient repository holding records in process memory."""

    resource = "Patient"

    async def get_by_email(self, email: str) -> Patient | None:
        for record in self._records.values():
            if record.email == email:
                return record.model_copy(deep=True)
        return None

    async def delete(self, patient: Patient) -> None:
        if patient.id is None or self._records.pop(patient.id, None) is None:
            raise NotFoundError(self.resource, patient.id or 0)


class InMemoryEncounterRepository(_InMemoryRepository[Encounter]):
    """Encounter repository holding records in process memory."""

    resource = "Encounter"


__all__ = ["InMemoryEncounterRepository", "InMemoryPatientRepository"]
