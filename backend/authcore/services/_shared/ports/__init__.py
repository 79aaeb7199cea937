"""
authcore.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) the credential services depend on.

Modules
-------
- :mod:`clock`:
    :class:`~.Clock`: current instant; :class:`~.FrozenClock` for tests.
- :mod:`user_store`:
    :class:`~.UserStore` and :class:`~.UserRecord`: user lookup and partial
    updates, including the atomic refresh-token compare-and-set.
- :mod:`challenge_store`:
    :class:`~.ChallengeStore` and :class:`~.ChallengeRecord`: one OTP
    challenge per user with upsert semantics.
- :mod:`mailer`:
    :class:`~.Mailer`: delivery of verification codes.
- :mod:`oauth_exchange`:
    :class:`~.OAuthExchange`: third-party authorization-code exchange.

Design Notes
------------
Concrete adapters (SQLAlchemy, Redis, SMTP, Google) live under
``authcore.infra``. The in-memory doubles exported here back the unit tests.
"""

from __future__ import annotations

from .challenge_store import ChallengeRecord, ChallengeStore, InMemoryChallengeStore
from .clock import Clock, FrozenClock, SystemClock
from .mailer import Mailer, RecordingMailer
from .oauth_exchange import OAuthExchange, OAuthTokens, StubOAuthExchange
from .user_store import InMemoryUserStore, UserRecord, UserStore

__all__ = [
    "Clock",
    "SystemClock",
    "FrozenClock",
    "UserStore",
    "UserRecord",
    "InMemoryUserStore",
    "ChallengeStore",
    "ChallengeRecord",
    "InMemoryChallengeStore",
    "Mailer",
    "RecordingMailer",
    "OAuthExchange",
    "OAuthTokens",
    "StubOAuthExchange",
]
