"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from typing import Protocol

from .signup import Signup, SignupDraft, UseCase


class SignupRepository(Protocol):
    """Port interface for signup persistence."""

    def find_by_email(self, email: str) -> Signup | None:
        """
        Look up a signup by normalized email.

        Raises:
            StorageError: If the store cannot be reached
        """
        ...

    def insert_if_absent(self, draft: SignupDraft, submitted_at: datetime) -> Signup | None:
        """
        Atomically insert a signup unless its email is already stored.

        The store assigns the ``id``. Uniqueness of the normalized email
        must hold across concurrent writers (unique constraint or lock).

        Args:
            draft: Validated, normalized submission
            submitted_at: Acceptance timestamp chosen by the service

        Returns:
            The stored Signup, or None if the email was already taken

        Raises:
            StorageError: If the store cannot be reached or times out
        """
        ...

    def update_by_email(
        self, email: str, name: str | None, use_case: UseCase | None
    ) -> Signup | None:
        """
        Update the mutable fields of an existing signup.

        A None argument leaves the stored value unchanged. ``id``,
        ``email`` and ``submitted_at`` are never modified.

        Returns:
            The updated Signup, or None if no signup has this email

        Raises:
            StorageError: If the store cannot be reached or times out
        """
        ...

    def ping(self) -> None:
        """
        Check that the store is reachable.

        Raises:
            StorageError: If the store cannot be reached
        """
        ...
