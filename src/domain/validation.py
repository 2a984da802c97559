"""
Submission validation - Authoritative checks on raw waitlist payloads.

validate_submission() is a pure function: it inspects an untyped,
already-parsed JSON value and either returns a normalized SignupDraft
or raises a SubmissionRejected subclass. Nothing is persisted here.

Check order matters for callers that submit several bad fields at once:
payload shape, consent, email, use case, name.
"""

import re
from typing import Any

from .exceptions import ConsentRequired, InvalidEmail, InvalidPayload, InvalidUseCase, NameTooLong
from .signup import SignupDraft, UseCase

NAME_MAX_LENGTH = 200
EMAIL_MAX_LENGTH = 254

# One "@", no whitespace anywhere, at least one "." after the "@"
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# C0 controls and DEL; PostgreSQL text cannot hold NUL at all
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def validate_submission(payload: Any, *, name_max_length: int = NAME_MAX_LENGTH) -> SignupDraft:
    """
    Validate a raw submission and build a normalized draft.

    Args:
        payload: Parsed JSON body (any type)
        name_max_length: Maximum length of the trimmed name

    Returns:
        SignupDraft with lower-cased email and trimmed optional fields

    Raises:
        InvalidPayload: Payload is not an object or a field has the wrong type
        ConsentRequired: consent is missing or not boolean true
        InvalidEmail: email is missing or not email-shaped
        InvalidUseCase: useCase is present but not an allowed label
        NameTooLong: name exceeds name_max_length after trimming
    """
    if not isinstance(payload, dict):
        raise InvalidPayload(f"expected a JSON object, got {type(payload).__name__}")

    raw_name = _optional_string(payload, "name")
    raw_use_case = _optional_string(payload, "useCase")

    # bool check rejects 1, "true" and other truthy stand-ins
    if payload.get("consent") is not True:
        raise ConsentRequired("consent must be true")

    email = _validate_email(payload.get("email"))
    use_case = _validate_use_case(raw_use_case)
    name = _validate_name(raw_name, name_max_length)

    return SignupDraft(email=email, consent=True, name=name, use_case=use_case)


def _optional_string(payload: dict, field: str) -> str | None:
    value = payload.get(field)
    if value is not None and not isinstance(value, str):
        raise InvalidPayload(f"{field} must be a string")
    return value


def _validate_email(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidEmail("email is missing or not a string")
    email = normalize_email(value)
    if len(email) > EMAIL_MAX_LENGTH or not _EMAIL_PATTERN.match(email):
        raise InvalidEmail("malformed email")
    if _CONTROL_CHARS.search(email):
        raise InvalidEmail("email contains control characters")
    return email


def _validate_use_case(value: str | None) -> UseCase | None:
    if value is None:
        return None
    try:
        return UseCase(value.strip().lower())
    except ValueError:
        raise InvalidUseCase("unknown use case") from None


def _validate_name(value: str | None, max_length: int) -> str | None:
    if value is None:
        return None
    name = value.strip()
    if _CONTROL_CHARS.search(name):
        raise InvalidPayload("name contains control characters")
    if len(name) > max_length:
        raise NameTooLong(f"name has {len(name)} characters (max {max_length})")
    return name or None
