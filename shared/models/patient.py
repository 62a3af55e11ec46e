"""Patient demographics record."""

from __future__ import annotations

from pydantic import Field

from .base import RecordModel


class Patient(RecordModel):
    """Demographic details for a single patient.

    ``email`` is the business key: no two stored patients share one.
    """

    first_name: str = Field(description="Patient given name")
    last_name: str = Field(description="Patient family name")
    ssn: str = Field(description="Government identifier, e.g. ``123-12-1234``")
    email: str = Field(description="Unique contact email")
    age: int = Field(ge=0, description="Age in years")
    height: int = Field(ge=0, description="Height in inches")
    weight: int = Field(ge=0, description="Weight in pounds")
    insurance: str = Field(description="Insurance carrier name")
    gender: str = Field(description="Free-text gender")
    street: str = Field(description="Street address")
    city: str
    state: str
    zip_code: str


__all__ = ["Patient"]
