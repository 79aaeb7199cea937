"""Service layer public API.

This package exposes the credential services so that callers can import from
:mod:`authcore.services` without knowing the internal structure.

Re-exports
----------
- Base primitives (from ``authcore.services._shared``)
    * :class:`BaseService`
    * :class:`Failure`, :class:`FailureKind`

- Token codec (from ``authcore.services.tokens``)
    * :class:`TokenCodec`
    * DTOs: :class:`TokenCodecConfig`, :class:`TokenKind`, :class:`TokenClaims`

- Session service (from ``authcore.services.sessions``)
    * :class:`SessionService`
    * DTOs: :class:`LoginIn`, :class:`RefreshIn`, :class:`LogoutIn`,
      :class:`PasswordChangeIn`, :class:`TokenPairOut`, :class:`UserPublicOut`

- Verification service (from ``authcore.services.verification``)
    * :class:`VerificationService`, :class:`OtpPolicy`
    * DTOs: :class:`SendChallengeIn`, :class:`VerifyChallengeIn`

- Registration and OAuth acknowledgement
    * :class:`RegistrationService`, :class:`RegisterIn`
    * :class:`OAuthService`
"""

from __future__ import annotations

# Base primitives
from ._shared.base import BaseService
from ._shared.failures import Failure, FailureKind
from .oauth.service import OAuthService
from .registration.dto import RegisterIn

# Registration + OAuth
from .registration.service import RegistrationService
from .sessions.dto import (
    LoginIn,
    LogoutIn,
    PasswordChangeIn,
    RefreshIn,
    TokenPairOut,
    UserPublicOut,
)

# Sessions
from .sessions.service import SessionService

# Tokens
from .tokens.codec import TokenCodec
from .tokens.dto import TokenClaims, TokenCodecConfig, TokenKind
from .verification.dto import SendChallengeIn, VerifyChallengeIn
from .verification.otp import OtpPolicy

# Verification
from .verification.service import VerificationService

__all__ = [
    # Base
    "BaseService",
    "Failure",
    "FailureKind",
    # Tokens
    "TokenCodec",
    "TokenCodecConfig",
    "TokenKind",
    "TokenClaims",
    # Sessions
    "SessionService",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "PasswordChangeIn",
    "TokenPairOut",
    "UserPublicOut",
    # Verification
    "VerificationService",
    "OtpPolicy",
    "SendChallengeIn",
    "VerifyChallengeIn",
    # Registration / OAuth
    "RegistrationService",
    "RegisterIn",
    "OAuthService",
]
