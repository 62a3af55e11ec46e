"""Business rules for creating, reading, updating and deleting patients."""

from __future__ import annotations

from typing import Any

from repositories.interfaces import PatientRepository
from shared.http.errors import ConflictError, NotFoundError, ServiceUnavailableError
from shared.models import Patient
from shared.observability.logger import get_logger

RESOURCE = "Patient"


class PatientService:
    """Translate patient repository outcomes into typed application errors.

    Every repository failure surfaces as :class:`ServiceUnavailableError`.
    A lookup that succeeds without a record surfaces as
    :class:`NotFoundError`. A :class:`NotFoundError` raised by the repository
    while writing is passed through unchanged.

    The duplicate-email check and the write that follows are separate round
    trips, so two concurrent writers may both pass the check. The unique
    constraint on the ``patients`` table is what ultimately rejects the loser.
    """

    def __init__(self, repository: PatientRepository, logger: Any | None = None) -> None:
        self._repository = repository
        self._logger = logger or get_logger(__name__)

    async def list_all(self) -> list[Patient]:
        try:
            return await self._repository.list_all()
        except Exception as exc:
            self._logger.error("patient_list_failed", error=str(exc))
            raise ServiceUnavailableError() from exc

    async def get_by_id(self, patient_id: int) -> Patient:
        try:
            patient = await self._repository.get_by_id(patient_id)
        except Exception as exc:
            self._logger.error("patient_lookup_failed", patient_id=patient_id, error=str(exc))
            raise ServiceUnavailableError() from exc

        if patient is None:
            self._logger.info("patient_not_found", patient_id=patient_id)
            raise NotFoundError(RESOURCE, patient_id)
        return patient

    async def create(self, patient: Patient) -> Patient:
        await self._ensure_email_available(patient.email)

        try:
            created = await self._repository.create(patient)
        except Exception as exc:
            self._logger.error("patient_create_failed", error=str(exc))
            raise ServiceUnavailableError() from exc

        self._logger.info("patient_created", patient_id=created.id)
        return created

    async def update(self, patient_id: int, patient: Patient) -> Patient:
        await self.get_by_id(patient_id)
        await self._ensure_email_available(patient.email, patient_id=patient_id)

        replacement = patient.model_copy(update={"id": patient_id})
        try:
            updated = await self._repository.update(replacement)
        except NotFoundError:
            raise
        except Exception as exc:
            self._logger.error("patient_update_failed", patient_id=patient_id, error=str(exc))
            raise ServiceUnavailableError() from exc

        self._logger.info("patient_updated", patient_id=patient_id)
        return updated

    async def delete_by_id(self, patient_id: int) -> None:
        patient = await self.get_by_id(patient_id)

        try:
            await self._repository.delete(patient)
        except NotFoundError:
            raise
        except Exception as exc:
            self._logger.error("patient_delete_failed", patient_id=patient_id, error=str(exc))
            raise ServiceUnavailableError() from exc

        self._logger.info("patient_deleted", patient_id=patient_id)

    async def _ensure_email_available(
        self, email: str, *, patient_id: int | None = None
    ) -> None:
        """Raise :class:`ConflictError` if another patient already uses ``email``.

        When ``patient_id`` is given, a match on that same patient is allowed so
        an update may keep its current email.
        """

        try:
            existing = await self._repository.get_by_email(email)
        except Exception as exc:
            self._logger.error("patient_email_lookup_failed", error=str(exc))
            raise ServiceUnavailableError() from exc

        if existing is None:
            return
        if patient_id is not None and existing.id == patient_id:
            return

        self._logger.warning(
            "patient_email_conflict", existing_patient_id=existing.id, patient_id=patient_id
        )
        raise ConflictError(email)


__all__ = ["PatientService"]
