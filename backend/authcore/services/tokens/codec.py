# authcore/services/tokens/codec.py
"""
Stateless signing and verification of access/refresh tokens.

Tokens are HS256 JWTs carrying ``sub`` (user id as string), ``type``,
``iat``, ``exp`` and a random ``jti``. Validity is decided against the
injected :class:`Clock` rather than PyJWT's own wall-clock checks, so
expiry is deterministic under test.

Expiry is exclusive: a token issued at ``T`` with lifetime ``ttl`` is valid
through ``T + ttl - 1s`` and expired from ``T + ttl`` on.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.ports.clock import Clock, SystemClock
from authcore.services.tokens.dto import (
    IssuedToken,
    TokenClaims,
    TokenCodecConfig,
    TokenKind,
)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "type", "iat", "exp", "jti"]

# Time is checked against the injected clock, not by PyJWT.
_DECODE_OPTIONS: dict[str, Any] = {
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "require": REQUIRED_CLAIMS,
}


class TokenCodec:
    """
    Sign, verify and decode access and refresh tokens.

    The codec performs no I/O and holds no mutable state: the output of
    :meth:`verify` depends only on the token, the secret and the clock.
    """

    def __init__(self, *, config: TokenCodecConfig, clock: Clock | None = None) -> None:
        """
        :param config: Secrets and lifetimes per token family.
        :param clock: Time source used for ``iat``/``exp`` and expiry checks.
        """
        self.cfg = config
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------ #
    # Low-level primitives
    # ------------------------------------------------------------------ #

    def issue(
        self, user_id: int | str, kind: TokenKind, secret: str, ttl: timedelta
    ) -> IssuedToken:
        """
        Encode ``user_id`` and an expiry of ``now + ttl`` and sign with ``secret``.

        :returns: The encoded token together with its expiry instant.
        """
        iat = int(self.clock.now().timestamp())
        exp = iat + int(ttl.total_seconds())
        payload = {
            "sub": str(user_id),
            "type": kind.value,
            "iat": iat,
            "exp": exp,
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, expires_at=datetime.fromtimestamp(exp, tz=UTC))

    def verify(self, token: str, secret: str, kind: TokenKind) -> TokenClaims | Failure:
        """
        Check signature, structure and expiry of ``token``.

        :returns: Decoded claims, or ``Failure(MALFORMED)`` for a bad signature,
            broken structure or wrong token type, or ``Failure(EXPIRED)`` when the
            signature is valid but the expiry instant has been reached.
        """
        if not token or not isinstance(token, str):
            return Failure(FailureKind.MALFORMED, "Token is missing or not a string")
        try:
            payload = jwt.decode(token, secret, algorithms=[ALGORITHM], options=_DECODE_OPTIONS)
        except jwt.InvalidTokenError:
            return Failure(FailureKind.MALFORMED, "Token signature or structure is invalid")

        if payload.get("type") != kind.value:
            return Failure(FailureKind.MALFORMED, f"Wrong token type: {kind.value} token required")

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject.isdigit():
            return Failure(FailureKind.MALFORMED, "Invalid token subject")

        try:
            iat = int(payload["iat"])
            exp = int(payload["exp"])
        except (TypeError, ValueError):
            return Failure(FailureKind.MALFORMED, "Invalid token timestamps")

        if self.clock.now().timestamp() >= exp:
            return Failure(FailureKind.EXPIRED, f"{kind.value.capitalize()} token has expired")

        return TokenClaims(
            user_id=int(subject),
            kind=kind,
            issued_at=datetime.fromtimestamp(iat, tz=UTC),
            expires_at=datetime.fromtimestamp(exp, tz=UTC),
            jti=str(payload["jti"]),
        )

    # ------------------------------------------------------------------ #
    # Configured helpers
    # ------------------------------------------------------------------ #

    def issue_kind(self, user_id: int | str, kind: TokenKind) -> IssuedToken:
        """Issue a token of ``kind`` with the configured secret and lifetime."""
        return self.issue(user_id, kind, self.cfg.secret_for(kind), self.cfg.ttl_for(kind))

    def issue_pair(self, user_id: int | str) -> tuple[IssuedToken, IssuedToken]:
        """Issue an ``(access, refresh)`` pair. Tokens are never issued alone."""
        return (
            self.issue_kind(user_id, TokenKind.ACCESS),
            self.issue_kind(user_id, TokenKind.REFRESH),
        )

    def verify_kind(self, token: str, kind: TokenKind) -> TokenClaims | Failure:
        """Verify ``token`` against the configured secret for ``kind``."""
        return self.verify(token, self.cfg.secret_for(kind), kind)
