"""Typed failure values returned by the credential services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(Enum):
    """Outcome categories a caller is expected to branch on."""

    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    ALREADY_VERIFIED = "already_verified"
    THROTTLED = "throttled"
    INVALID_FORMAT = "invalid_format"
    NO_CHALLENGE = "no_challenge"
    EXPIRED = "expired"
    CODE_MISMATCH = "code_mismatch"
    TOKEN_MISMATCH = "token_mismatch"
    MALFORMED = "malformed"
    CONFLICT = "conflict"
    TRANSIENT = "transient"

    @property
    def retryable(self) -> bool:
        """Only collaborator I/O failures may be retried by the caller."""
        return self is FailureKind.TRANSIENT


@dataclass(frozen=True, slots=True)
class Failure:
    """
    A business-rule violation, returned instead of raised.

    :param kind: Failure category.
    :type kind: FailureKind
    :param message: Short human-readable explanation (safe for clients).
    :type message: str
    """

    kind: FailureKind
    message: str

