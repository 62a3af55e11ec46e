"""Protocol definitions for record repositories.

Lookups return ``None`` when the call succeeded but nothing matched. Any
storage problem is raised instead, so callers can tell the two apart.
"""

from __future__ import annotations

from typing import Protocol

from shared.models import Encounter, Patient


class PatientRepository(Protocol):
    """Storage operations for :class:`Patient` records."""

    async def list_all(self) -> list[Patient]:
        """Return every stored patient ordered by id."""

    async def get_by_id(self, patient_id: int) -> Patient | None:
        """Return the patient stored under ``patient_id`` if one exists."""

    async def get_by_email(self, email: str) -> Patient | None:
        """Return the patient registered with ``email`` if one exists."""

    async def create(self, patient: Patient) -> Patient:
        """Persist ``patient`` and return it with its assigned id."""

    async def update(self, patient: Patient) -> Patient:
        """Replace the stored patient sharing ``patient.id``."""

    async def delete(self, patient: Patient) -> None:
        """Remove the stored patient sharing ``patient.id``."""


class EncounterRepository(Protocol):
    """Storage operations for :class:`Encounter` records."""

    async def list_all(self) -> list[Encounter]:
        """Return every stored encounter ordered by id."""

    async def get_by_id(self, encounter_id: int) -> Encounter | None:
        """Return the encounter stored under ``encounter_id`` if one exists."""

    async def create(self, encounter: Encounter) -> Encounter:
        """Persist ``encounter`` and return it with its assigned id."""

    async def update(self, encounter: Encounter) -> Encounter:
        """Replace the stored encounter sharing ``encounter.id``."""


__all__ = ["EncounterRepository", "PatientRepository"]
