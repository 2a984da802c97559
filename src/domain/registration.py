"""
Registration domain service - Exactly-once waitlist signups.

This module turns a validated SignupDraft into a durable, deduplicated
record.

Deduplication Flow
==================

1. Look up the normalized email.
2. Not found: stamp ``submitted_at`` and call insert_if_absent().
   - Inserted          -> CREATED
   - Key already taken -> another request won the race; continue at 3.
3. Found: update ``name``/``use_case`` when supplied and different.
   ``id`` and ``submitted_at`` are never touched -> ALREADY_REGISTERED

The uniqueness of the normalized email is enforced by the store
(unique index, or a lock for the in-memory adapter), so concurrent
submissions for one email produce exactly one insert no matter how
many service instances run.

Transient StorageError failures are retried a bounded number of times
with exponential backoff before StorageUnavailable is raised.
PermanentStorageError is surfaced as StorageUnavailable at once.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .exceptions import PermanentStorageError, StorageError, StorageUnavailable
from .ports import SignupRepository
from .signup import RegistrationOutcome, RegistrationResult, Signup, SignupDraft

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistrationService:
    """
    Domain service for waitlist registration.

    Orchestrates lookup, insert-if-absent, update fallback and
    bounded retries against the injected repository.
    """

    repository: SignupRepository
    max_attempts: int = 3
    retry_backoff_seconds: float = 0.05
    clock: Callable[[], datetime] = field(default=_utcnow)
    sleep: Callable[[float], None] = field(default=time.sleep)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def register(self, draft: SignupDraft) -> RegistrationResult:
        """
        Record a validated submission exactly once.

        Args:
            draft: Normalized submission from validate_submission()

        Returns:
            RegistrationResult with CREATED or ALREADY_REGISTERED

        Raises:
            StorageUnavailable: If every attempt failed with StorageError,
                or the store refused the write with PermanentStorageError
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = self._register_once(draft)
            except PermanentStorageError as e:
                logger.error("Store rejected signup permanently: %s", e)
                raise StorageUnavailable("store rejected the write") from e
            except StorageError as e:
                logger.warning(
                    "Storage error on attempt %d/%d for signup: %s",
                    attempt,
                    self.max_attempts,
                    e,
                )
                if attempt < self.max_attempts:
                    self.sleep(self.retry_backoff_seconds * 2 ** (attempt - 1))
                continue
            if result is not None:
                logger.info("Signup %s: %s", result.outcome.value, result.signup.email)
                return result
            # Record vanished between insert conflict and update; start over
            logger.warning("Signup disappeared during registration, retrying")

        logger.error("Storage unavailable after %d attempts", self.max_attempts)
        raise StorageUnavailable(f"registration failed after {self.max_attempts} attempts")

    def _register_once(self, draft: SignupDraft) -> RegistrationResult | None:
        existing = self.repository.find_by_email(draft.email)

        if existing is None:
            created = self.repository.insert_if_absent(draft, self.clock())
            if created is not None:
                return RegistrationResult(RegistrationOutcome.CREATED, created)
            # Lost the insert race: the winner's record is the one to update
            existing = self.repository.find_by_email(draft.email)
            if existing is None:
                return None

        updated = self._apply_updates(existing, draft)
        if updated is None:
            return None
        return RegistrationResult(RegistrationOutcome.ALREADY_REGISTERED, updated)

    def _apply_updates(self, existing: Signup, draft: SignupDraft) -> Signup | None:
        """Update mutable fields that were supplied and differ from the stored record."""
        name = draft.name if draft.name is not None and draft.name != existing.name else None
        use_case = (
            draft.use_case
            if draft.use_case is not None and draft.use_case != existing.use_case
            else None
        )
        if name is None and use_case is None:
            return existing
        return self.repository.update_by_email(existing.email, name, use_case)
