"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    OAuthCallbackQuerySchema,
    OtpSendSchema,
    OtpVerifySchema,
    PasswordChangeSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)

__all__ = [
    "LoginSchema",
    "OAuthCallbackQuerySchema",
    "OtpSendSchema",
    "OtpVerifySchema",
    "PasswordChangeSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserSchema",
]
