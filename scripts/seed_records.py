"""Bootstrap the records schema and load demo patients and encounters."""

from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal
from typing import Iterable

from repositories.postgres import (
    PostgresDatabase,
    PostgresEncounterRepository,
    PostgresPatientRepository,
)
from services.records.encounters import EncounterService
from services.records.patients import PatientService
from shared.config.settings import get_settings
from shared.http.errors import ConflictError
from shared.models import Encounter, Patient

DEMO_PATIENTS: tuple[Patient, ...] = (
    Patient(
        first_name="John",
        last_name="Smith",
        ssn="123-12-1234",
        email="email1@mail.com",
        age=29,
        height=80,
        weight=150,
        insurance="Self-Insured",
        gender="Male",
        street="1 Main St",
        city="New York",
        state="NY",
        zip_code="29445",
    ),
    Patient(
        first_name="Jane",
        last_name="Doe",
        ssn="321-21-4321",
        email="email2@mail.com",
        age=41,
        height=65,
        weight=135,
        insurance="Blue Cross",
        gender="Female",
        street="22 Elm St",
        city="Charleston",
        state="SC",
        zip_code="29401",
    ),
)


def _demo_encounters(patient_ids: Iterable[int]) -> list[Encounter]:
    return [
        Encounter(
            patient_id=patient_id,
            notes="new note",
            visit_code="N3W 3C3",
            provider="new provider",
            billing_code="123.456.789-00",
            icd10="Z99",
            total_cost=Decimal("150.30"),
            copay=Decimal("10.10"),
            chief_complaint="Pain",
            pulse=110,
            systolic=60,
            diastolic=90,
            date="2020-03-15",
        )
        for patient_id in patient_ids
    ]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prepare the records database and insert demo patients and encounters."
    )
    parser.add_argument(
        "--dsn",
        dest="dsn",
        default=None,
        help="Postgres DSN (default: RECORDS_DB_DSN / DATABASE_URL from the environment).",
    )
    parser.add_argument(
        "--bootstrap-schema",
        dest="bootstrap_schema",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Create the records tables before seeding.",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Remove all existing records before seeding.",
    )
    return parser


async def seed(
    patients: PatientService, encounters: EncounterService
) -> tuple[list[Patient], list[Encounter]]:
    """Create the demo records, skipping patients whose email is already taken."""

    created_patients: list[Patient] = []
    for patient in DEMO_PATIENTS:
        try:
            created = await patients.create(patient)
        except ConflictError as exc:
            print(f"Skipped patient: {exc}")
            continue
        created_patients.append(created)
        print(f"Created patient {created.id} <{created.email}>")

    created_encounters: list[Encounter] = []
    ids = [patient.id for patient in created_patients if patient.id is not None]
    for encounter in _demo_encounters(ids):
        created = await encounters.create(encounter)
        created_encounters.append(created)
        print(f"Created encounter {created.id} for patient {created.patient_id}")

    return created_patients, created_encounters


async def _run_async(args: argparse.Namespace) -> int:
    db_settings = get_settings().database
    if args.dsn:
        db_settings = db_settings.model_copy(update={"dsn": args.dsn})

    database = PostgresDatabase.from_settings(db_settings)
    await database.open()
    try:
        if args.bootstrap_schema:
            await database.bootstrap_schema()
        if args.reset:
            await database.reset()
        await seed(
            PatientService(PostgresPatientRepository(database)),
            EncounterService(PostgresEncounterRepository(database)),
        )
    finally:
        await database.close()
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    parsed_args = parser.parse_args(None if argv is None else list(argv))
    try:
        return asyncio.run(_run_async(parsed_args))
    except KeyboardInterrupt:  # pragma: no cover - manual cancellation guard
        return 130
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
