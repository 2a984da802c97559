"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the waitlist signup
service. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    ConsentRequired,
    ErrorKind,
    InvalidEmail,
    InvalidPayload,
    InvalidUseCase,
    NameTooLong,
    PermanentStorageError,
    StorageError,
    StorageUnavailable,
    SubmissionRejected,
    WaitlistError,
)
from .ports import SignupRepository
from .registration import RegistrationService
from .signup import RegistrationOutcome, RegistrationResult, Signup, SignupDraft, UseCase
from .validation import normalize_email, validate_submission

__all__ = [
    "ConsentRequired",
    "ErrorKind",
    "InvalidEmail",
    "InvalidPayload",
    "InvalidUseCase",
    "NameTooLong",
    "PermanentStorageError",
    "RegistrationOutcome",
    "RegistrationResult",
    "RegistrationService",
    "Signup",
    "SignupDraft",
    "SignupRepository",
    "StorageError",
    "StorageUnavailable",
    "SubmissionRejected",
    "UseCase",
    "WaitlistError",
    "normalize_email",
    "validate_submission",
]
