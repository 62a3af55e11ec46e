"""FastAPI application exposing patient and encounter records."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status

from repositories.interfaces import EncounterRepository, PatientRepository
from repositories.memory import InMemoryEncounterRepository, InMemoryPatientRepository
from repositories.postgres import (
    PostgresDatabase,
    PostgresEncounterRepository,
    PostgresPatientRepository,
)
from services.records.encounters import EncounterService
from services.records.patients import PatientService
from shared.config.settings import Settings, get_settings
from shared.http.errors import register_exception_handlers
from shared.models import Encounter, Patient
from shared.observability.logger import configure_logging, get_logger
from shared.observability.middleware import (
    CorrelationIdMiddleware,
    RequestTimingMiddleware,
)

logger = get_logger(__name__)

patients_router = APIRouter(prefix="/patients", tags=["patients"])
encounters_router = APIRouter(prefix="/encounters", tags=["encounters"])


def get_patient_service(request: Request) -> PatientService:
    """Return the :class:`PatientService` bound to the running application."""

    return request.app.state.patient_service


def get_encounter_service(request: Request) -> EncounterService:
    """Return the :class:`EncounterService` bound to the running application."""

    return request.app.state.encounter_service


@patients_router.get("", response_model=list[Patient])
async def list_patients(
    service: PatientService = Depends(get_patient_service),
) -> list[Patient]:
    return await service.list_all()


@patients_router.get("/{patient_id}", response_model=Patient)
async def read_patient(
    patient_id: int, service: PatientService = Depends(get_patient_service)
) -> Patient:
    return await service.get_by_id(patient_id)


@patients_router.post("", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient: Patient, service: PatientService = Depends(get_patient_service)
) -> Patient:
    return await service.create(patient)


@patients_router.put("/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: int,
    patient: Patient,
    service: PatientService = Depends(get_patient_service),
) -> Patient:
    return await service.update(patient_id, patient)


@patients_router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(
    patient_id: int, service: PatientService = Depends(get_patient_service)
) -> Response:
    await service.delete_by_id(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@encounters_router.get("", response_model=list[Encounter])
async def list_encounters(
    service: EncounterService = Depends(get_encounter_service),
) -> list[Encounter]:
    return await service.list_all()


@encounters_router.get("/{encounter_id}", response_model=Encounter)
async def read_encounter(
    encounter_id: int, service: EncounterService = Depends(get_encounter_service)
) -> Encounter:
    return await service.get_by_id(encounter_id)


@encounters_router.post(
    "", response_model=Encounter, status_code=status.HTTP_201_CREATED
)
async def create_encounter(
    encounter: Encounter, service: EncounterService = Depends(get_encounter_service)
) -> Encounter:
    return await service.create(encounter)


@encounters_router.put("/{encounter_id}", response_model=Encounter)
async def update_encounter(
    encounter_id: int,
    encounter: Encounter,
    service: EncounterService = Depends(get_encounter_service),
) -> Encounter:
    return await service.update(encounter_id, encounter)


def create_app(
    settings: Settings | None = None,
    *,
    patient_repository: PatientRepository | None = None,
    encounter_repository: EncounterRepository | None = None,
) -> FastAPI:
    """Build the records application with its services wired in.

    Explicit repositories take precedence over ``settings.database.backend``.
    With the ``postgres`` backend the connection pool is opened and closed by
    the application lifespan.
    """

    settings = settings or get_settings()
    service_name = settings.app.service_name
    configure_logging(service_name=service_name, level=settings.logging.level)

    database: PostgresDatabase | None = None
    if patient_repository is None or encounter_repository is None:
        if settings.database.backend == "postgres":
            database = PostgresDatabase.from_settings(settings.database)
            patient_repository = patient_repository or PostgresPatientRepository(database)
            encounter_repository = encounter_repository or PostgresEncounterRepository(
                database
            )
        else:
            patient_repository = patient_repository or InMemoryPatientRepository()
            encounter_repository = encounter_repository or InMemoryEncounterRepository()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if database is None:
            yield
            return
        await database.open()
        if settings.database.bootstrap_schema:
            await database.bootstrap_schema()
        logger.info("database_pool_opened", backend="postgres")
        try:
            yield
        finally:
            await database.close()
            logger.info("database_pool_closed", backend="postgres")

    app = FastAPI(title="Medical Records Service", lifespan=lifespan)
    app.state.patient_service = PatientService(patient_repository)
    app.state.encounter_service = EncounterService(encounter_repository)

    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return a simple health payload for orchestration checks."""

        return {"status": "ok", "service": service_name}

    app.include_router(patients_router)
    app.include_router(encounters_router)
    return app


app = create_app()


__all__ = [
    "app",
    "create_app",
    "get_encounter_service",
    "get_patient_service",
]
