"""
Signup data model - Entities and value types for the waitlist.

A Signup is the durable record of one accepted waitlist submission.
Exactly one Signup exists per normalized email; ``email``, ``id`` and
``submitted_at`` never change after creation.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UseCase(str, Enum):
    """Allowed use-case labels a submitter may tag their signup with."""

    RESEARCH = "research"
    INDUSTRY = "industry"
    EDUCATION = "education"
    PERSONAL = "personal"
    OTHER = "other"


class RegistrationOutcome(Enum):
    """
    Result of registering a draft.

    Both values are successful outcomes; the distinction is only logged.
    """

    CREATED = "created"
    ALREADY_REGISTERED = "already_registered"


@dataclass(frozen=True)
class SignupDraft:
    """Validated, normalized submission that has not been persisted yet."""

    email: str
    consent: bool = True
    name: str | None = None
    use_case: UseCase | None = None


@dataclass(frozen=True)
class Signup:
    """Stored waitlist signup."""

    id: str
    email: str
    submitted_at: datetime
    consent: bool = True
    name: str | None = None
    use_case: UseCase | None = None


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of RegistrationService.register() with the stored record."""

    outcome: RegistrationOutcome
    signup: Signup
