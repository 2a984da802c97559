"""
Domain exceptions - Semantic error types for waitlist signups.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Every WaitlistError carries an ErrorKind and a short client-facing
``reason``. The exception message itself may hold diagnostic detail
for logs; only ``reason`` is ever shown to the submitter.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-checkable category of a rejected or failed submission."""

    INVALID_PAYLOAD = "InvalidPayload"
    INVALID_EMAIL = "InvalidEmail"
    CONSENT_REQUIRED = "ConsentRequired"
    INVALID_USE_CASE = "InvalidUseCase"
    NAME_TOO_LONG = "NameTooLong"
    STORAGE_UNAVAILABLE = "StorageUnavailable"


class WaitlistError(Exception):
    """Base class for waitlist domain errors."""

    kind: ErrorKind
    reason: str


class SubmissionRejected(WaitlistError):
    """Client input failed validation. Never retried, never a system failure."""


class InvalidPayload(SubmissionRejected):
    """Body is not structured data, or a field has the wrong type."""

    kind = ErrorKind.INVALID_PAYLOAD
    reason = "Invalid request body"


class InvalidEmail(SubmissionRejected):
    """Email is missing, not a string, or not email-shaped."""

    kind = ErrorKind.INVALID_EMAIL
    reason = "Invalid email"


class ConsentRequired(SubmissionRejected):
    """Consent is missing or not boolean true."""

    kind = ErrorKind.CONSENT_REQUIRED
    reason = "Consent is required"


class InvalidUseCase(SubmissionRejected):
    """Use case is present but not one of the allowed labels."""

    kind = ErrorKind.INVALID_USE_CASE
    reason = "Invalid use case"


class NameTooLong(SubmissionRejected):
    """Name exceeds the configured length bound."""

    kind = ErrorKind.NAME_TOO_LONG
    reason = "Name is too long"


class StorageUnavailable(WaitlistError):
    """Store could not be reached or written after bounded retries."""

    kind = ErrorKind.STORAGE_UNAVAILABLE
    reason = "Service temporarily unavailable"


class StorageError(Exception):
    """
    Transient failure raised by repository adapters.

    Wraps driver-specific errors (connection loss, timeouts, conflicts)
    so the domain can retry without knowing the storage technology.
    """


class PermanentStorageError(StorageError):
    """
    Deterministic store failure that retrying cannot fix.

    Raised for writes the store refuses outright (invalid data,
    constraint or schema errors). The service surfaces it immediately.
    """
