"""Clinical encounter record."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from .base import RecordModel


class Encounter(RecordModel):
    """A single visit recorded against a patient.

    ``patient_id`` is stored as supplied; nothing at this layer checks that
    the referenced patient exists.
    """

    patient_id: int = Field(description="Identifier of the patient seen")
    notes: str | None = Field(default=None, description="Free-text visit notes")
    visit_code: str = Field(description="Visit code, e.g. ``N3W 3C3``")
    provider: str = Field(description="Name of the treating provider")
    billing_code: str = Field(description="Billing code, e.g. ``123.456.789-00``")
    icd10: str = Field(description="ICD-10 diagnosis code")
    total_cost: Decimal = Field(ge=0, decimal_places=2)
    copay: Decimal = Field(ge=0, decimal_places=2)
    chief_complaint: str
    pulse: int | None = None
    systolic: int | None = None
    diastolic: int | None = None
    date: str = Field(description="Visit date as ``YYYY-MM-DD``")


__all__ = ["Encounter"]
