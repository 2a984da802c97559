"""
In-memory repository adapter - Implements SignupRepository protocol.

Keeps signups in a dict keyed by normalized email. A single lock guards
every read and write, which makes insert_if_absent() atomic inside one
process. Data is lost on restart and is not shared between processes,
so this adapter only suits tests and single-instance deployments.
"""

import dataclasses
import threading
import uuid
from datetime import datetime

from src.domain.signup import Signup, SignupDraft, UseCase


class InMemorySignupRepository:
    """
    Implements SignupRepository protocol with a lock-guarded dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._signups: dict[str, Signup] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Signup | None:
        with self._lock:
            return self._signups.get(email)

    def insert_if_absent(self, draft: SignupDraft, submitted_at: datetime) -> Signup | None:
        with self._lock:
            if draft.email in self._signups:
                return None
            signup = Signup(
                id=str(uuid.uuid4()),
                email=draft.email,
                submitted_at=submitted_at,
                consent=True,
                name=draft.name,
                use_case=draft.use_case,
            )
            self._signups[draft.email] = signup
            return signup

    def update_by_email(
        self, email: str, name: str | None, use_case: UseCase | None
    ) -> Signup | None:
        with self._lock:
            existing = self._signups.get(email)
            if existing is None:
                return None
            updated = dataclasses.replace(
                existing,
                name=name if name is not None else existing.name,
                use_case=use_case if use_case is not None else existing.use_case,
            )
            self._signups[email] = updated
            return updated

    def ping(self) -> None:
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._signups)
