from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ChallengeRecord:
    """
    Pending OTP challenge for one user.

    :ivar user_id: Owner user id (unique key).
    :ivar code: Six-digit code as an integer (zero-padded when displayed).
    :ivar issued_at: Instant the code was sent (UTC).
    """

    user_id: int
    code: int
    issued_at: datetime


class ChallengeStore(Protocol):
    """
    Keyed store of OTP challenges.

    ``upsert`` MUST replace any existing record for ``user_id`` in a single
    atomic write, so at most one challenge per user ever exists.
    """

    def get(self, user_id: int) -> ChallengeRecord | None: ...

    def upsert(self, user_id: int, code: int, issued_at: datetime) -> None: ...

    def delete(self, user_id: int) -> None:
        """Remove the record; deleting a missing record is not an error."""
        ...


class InMemoryChallengeStore(ChallengeStore):
    """Dictionary-backed challenge store for unit tests."""

    def __init__(self) -> None:
        self._records: dict[int, ChallengeRecord] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> ChallengeRecord | None:
        return self._records.get(user_id)

    def upsert(self, user_id: int, code: int, issued_at: datetime) -> None:
        with self._lock:
            self._records[user_id] = ChallengeRecord(
                user_id=user_id, code=code, issued_at=issued_at
            )

    def delete(self, user_id: int) -> None:
        with self._lock:
            self._records.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._records)
