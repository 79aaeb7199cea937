# authcore/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class TokenKind(str, Enum):
    """Token families; each has its own secret and lifetime."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A freshly signed token and its expiry hint.

    :param token: Encoded JWT.
    :type token: str
    :param expires_at: Instant at which the token stops being valid.
    :type expires_at: datetime
    """

    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified token payload.

    :param user_id: Subject user id.
    :type user_id: int
    :param kind: Token family.
    :type kind: TokenKind
    :param issued_at: ``iat`` claim.
    :type issued_at: datetime
    :param expires_at: ``exp`` claim.
    :type expires_at: datetime
    :param jti: Unique token id.
    :type jti: str
    """

    user_id: int
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    jti: str


@dataclass(frozen=True, slots=True)
class TokenCodecConfig:
    """
    Token emission configuration.

    :param access_secret: HMAC key for access tokens.
    :type access_secret: str
    :param refresh_secret: HMAC key for refresh tokens.
    :type refresh_secret: str
    :param access_ttl: Access token lifetime.
    :type access_ttl: timedelta
    :param refresh_ttl: Refresh token lifetime.
    :type refresh_ttl: timedelta
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=30)

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Token secrets must be non-empty.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets.")

    def secret_for(self, kind: TokenKind) -> str:
        return self.access_secret if kind is TokenKind.ACCESS else self.refresh_secret

    def ttl_for(self, kind: TokenKind) -> timedelta:
        return self.access_ttl if kind is TokenKind.ACCESS else self.refresh_ttl
