# authcore/services/verification/otp.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from authcore.services._shared.ports.clock import Clock, SystemClock

CODE_DIGITS = 6
_CODE_SPACE = 10**CODE_DIGITS


@dataclass(frozen=True, slots=True)
class OtpPolicy:
    """
    Timing rules of an OTP challenge.

    :param expiry: How long a code stays valid after issuance.
    :type expiry: timedelta
    :param cooldown: Minimum delay between two sends for the same user.
    :type cooldown: timedelta
    """

    expiry: timedelta = timedelta(minutes=5)
    cooldown: timedelta = timedelta(seconds=60)

    def __post_init__(self) -> None:
        if self.expiry <= timedelta(0) or self.cooldown < timedelta(0):
            raise ValueError("OTP expiry must be positive and cooldown non-negative.")

    def in_cooldown(self, issued_at: datetime, now: datetime) -> bool:
        # Exactly ``cooldown`` after issuance a resend is already allowed.
        return now - issued_at < self.cooldown

    def is_expired(self, issued_at: datetime, now: datetime) -> bool:
        return now - issued_at > self.expiry


@dataclass(frozen=True, slots=True)
class OtpIssue:
    """A generated code together with its issue and expiry instants."""

    code: int
    issued_at: datetime
    expires_at: datetime

    @property
    def display(self) -> str:
        return format_code(self.code)


def format_code(code: int) -> str:
    """Render ``code`` as the fixed-width string sent to the user."""
    return f"{code:0{CODE_DIGITS}d}"


class OtpGenerator:
    """Draw uniformly random six-digit codes from a CSPRNG."""

    def __init__(self, *, clock: Clock | None = None, policy: OtpPolicy | None = None) -> None:
        self.clock = clock or SystemClock()
        self.policy = policy or OtpPolicy()

    def generate(self) -> OtpIssue:
        now = self.clock.now()
        return OtpIssue(
            code=secrets.randbelow(_CODE_SPACE),
            issued_at=now,
            expires_at=now + self.policy.expiry,
        )
