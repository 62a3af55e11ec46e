"""Record models shared between repositories, services and the HTTP layer."""

from .base import CamelModel, RecordModel, to_camel
from .encounter import Encounter
from .patient import Patient

__all__ = ["CamelModel", "Encounter", "Patient", "RecordModel", "to_camel"]
