"""Patient and encounter record services."""

from .encounters import EncounterService
from .patients import PatientService

__all__ = ["EncounterService", "PatientService"]
