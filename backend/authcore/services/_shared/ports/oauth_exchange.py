from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from authcore.services._shared.failures import Failure, FailureKind


@dataclass(frozen=True, slots=True)
class OAuthTokens:
    """
    Token pair returned by a third-party authorization-code exchange.

    :ivar id_token: OpenID Connect ID token (JWT, unverified here).
    :ivar access_token: Provider access token.
    """

    id_token: str
    access_token: str


class OAuthExchange(Protocol):
    """
    Port for trading an authorization code for provider tokens.

    The credential core stops at receiving the pair; creating or linking a
    local account from it is out of scope.
    """

    def exchange_code(self, code: str) -> OAuthTokens | Failure: ...


class StubOAuthExchange(OAuthExchange):
    """Deterministic exchange used in unit and API tests."""

    def __init__(self, *, valid_code: str = "good-code") -> None:
        self.valid_code = valid_code
        self.calls: list[str] = []

    def exchange_code(self, code: str) -> OAuthTokens | Failure:
        self.calls.append(code)
        if code != self.valid_code:
            return Failure(FailureKind.MALFORMED, "Authorization code was rejected")
        return OAuthTokens(id_token=f"id-{code}", access_token=f"at-{code}")
