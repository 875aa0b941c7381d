"""Error taxonomy shared by enrollment, matching and the HTTP layer.

Every error carries the HTTP status it maps to and a human readable message,
so the request boundary can translate it without knowing the concrete type.
"""

from __future__ import annotations

from typing import Optional


class SmartAttendError(Exception):
    """Base class for all recoverable service errors."""

    status_code: int = 500
    default_message: str = "Unexpected error."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class EnrollError(SmartAttendError):
    """Raised when a student cannot be enrolled."""


class MatchError(SmartAttendError):
    """Raised when an attendance photo cannot be matched."""


class InvalidRequest(EnrollError):
    status_code = 400
    default_message = "Invalid request."


class InvalidImage(EnrollError, MatchError):
    status_code = 400
    default_message = "Invalid image data."


class NoFaceDetected(EnrollError, MatchError):
    status_code = 400
    default_message = "Face not detected."


class DuplicateId(EnrollError):
    status_code = 409
    default_message = "Student id already enrolled."


class NoMatchFound(MatchError):
    status_code = 404
    default_message = "No matching student found."


class StorageError(EnrollError, MatchError):
    status_code = 500
    default_message = "Storage error."


class EmbeddingError(EnrollError, MatchError):
    """The embedding provider failed or returned an unusable descriptor."""

    status_code = 500
    default_message = "Face embedding failed."


class EmbeddingTimeout(EmbeddingError):
    status_code = 503
    default_message = "Face embedding timed out."


__all__ = [
    "SmartAttendError",
    "EnrollError",
    "MatchError",
    "InvalidRequest",
    "InvalidImage",
    "NoFaceDetected",
    "DuplicateId",
    "NoMatchFound",
    "StorageError",
    "EmbeddingError",
    "EmbeddingTimeout",
]
