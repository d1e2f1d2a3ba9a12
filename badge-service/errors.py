"""
errors.py — Error Taxonomy
===========================
Every failure the service knows about carries an ErrorKind. Handlers map the
kind to a response shape; only VALIDATION ever reaches the caller with detail.
"""

from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    GENERATION = "generation"
    DISPATCH   = "dispatch"
    SINK       = "sink"
    ORIGIN     = "origin"
    UNKNOWN    = "unknown"


class BadgeServiceError(Exception):
    kind = ErrorKind.UNKNOWN


class ValidationFailed(BadgeServiceError):
    """Bad or missing input. `errors` is a list of {code, path, message}."""
    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[dict]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


class GenerationError(BadgeServiceError):
    kind = ErrorKind.GENERATION


class DispatchError(BadgeServiceError):
    kind = ErrorKind.DISPATCH


class SinkError(BadgeServiceError):
    kind = ErrorKind.SINK


class OriginNotAllowed(BadgeServiceError):
    kind = ErrorKind.ORIGIN

    def __init__(self, origin: str):
        super().__init__(f"Origin {origin} not allowed by CORS")
        self.origin = origin


@dataclass
class Failure:
    kind:    ErrorKind
    message: str
    errors:  list[dict] = field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: Exception) -> 'Failure':
        if isinstance(exc, ValidationFailed):
            return cls(kind=exc.kind, message=str(exc), errors=exc.errors)
        kind = exc.kind if isinstance(exc, BadgeServiceError) else ErrorKind.UNKNOWN
        return cls(kind=kind, message=str(exc))
