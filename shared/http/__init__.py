"""HTTP helpers and exception definitions used by the records service."""

from .errors import (
    DATABASE_UNAVAILABLE_MESSAGE,
    ConflictError,
    NotFoundError,
    ProblemDetails,
    ProblemDetailsException,
    ServiceUnavailableError,
    register_exception_handlers,
)

__all__ = [
    "DATABASE_UNAVAILABLE_MESSAGE",
    "ConflictError",
    "NotFoundError",
    "ProblemDetails",
    "ProblemDetailsException",
    "ServiceUnavailableError",
    "register_exception_handlers",
]
