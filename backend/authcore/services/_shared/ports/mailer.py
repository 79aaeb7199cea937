from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from authcore.services._shared.ports.user_store import UserRecord


class Mailer(Protocol):
    """
    Port for delivering verification codes.

    Returns ``True`` when the message was accepted for delivery and ``False``
    on a transient delivery failure. Implementations must not raise for
    ordinary delivery problems.
    """

    def send(self, user: UserRecord, code: str) -> bool: ...


@dataclass
class RecordingMailer(Mailer):
    """Test double that remembers every code it was asked to deliver."""

    fail: bool = False
    sent: list[tuple[str, str]] = field(default_factory=list)

    def send(self, user: UserRecord, code: str) -> bool:
        if self.fail:
            return False
        self.sent.append((user.email, code))
        return True

    @property
    def last_code(self) -> str | None:
        return self.sent[-1][1] if self.sent else None
