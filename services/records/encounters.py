"""Business rules for creating, reading and updating clinical encounters."""

from __future__ import annotations

from typing import Any

from repositories.interfaces import EncounterRepository
from shared.http.errors import NotFoundError, ServiceUnavailableError
from shared.models import Encounter
from shared.observability.logger import get_logger

RESOURCE = "Encounter"


class EncounterService:
    """Encounter counterpart of :class:`~services.records.patients.PatientService`.

    Encounters carry no uniqueness rule, so ``create`` writes directly. There
    is no delete operation.
    """

    def __init__(self, repository: EncounterRepository, logger: Any | None = None) -> None:
        self._repository = repository
        self._logger = logger or get_logger(__name__)

    async def list_all(self) -> list[Encounter]:
        try:
            return await self._repository.list_all()
        except Exception as exc:
            self._logger.error("encounter_list_failed", error=str(exc))
            raise ServiceUnavailableError() from exc

    async def get_by_id(self, encounter_id: int) -> Encounter:
        try:
            encounter = await self._repository.get_by_id(encounter_id)
        except Exception as exc:
            self._logger.error(
                "encounter_lookup_failed", encounter_id=encounter_id, error=str(exc)
            )
            raise ServiceUnavailableError() from exc

        if encounter is None:
            self._logger.info("encounter_not_found", encounter_id=encounter_id)
            raise NotFoundError(RESOURCE, encounter_id)
        return encounter

    async def create(self, encounter: Encounter) -> Encounter:
        try:
            created = await self._repository.create(encounter)
        except Exception as exc:
            self._logger.error(
                "encounter_create_failed", patient_id=encounter.patient_id, error=str(exc)
            )
            raise ServiceUnavailableError() from exc

        self._logger.info(
            "encounter_created", encounter_id=created.id, patient_id=created.patient_id
        )
        return created

    async def update(self, encounter_id: int, encounter: Encounter) -> Encounter:
        await self.get_by_id(encounter_id)

        replacement = encounter.model_copy(update={"id": encounter_id})
        try:
            updated = await self._repository.update(replacement)
        except NotFoundError:
            raise
        except Exception as exc:
            self._logger.error(
                "encounter_update_failed", encounter_id=encounter_id, error=str(exc)
            )
            raise ServiceUnavailableError() from exc

        self._logger.info("encounter_updated", encounter_id=encounter_id)
        return updated


__all__ = ["EncounterService"]
