# authcore/services/sessions/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized by the store).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT as presented by the client.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param user_id: Authenticated user id (required).
    :type user_id: int | None
    """

    user_id: int | None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for a password change by an authenticated user.

    :param user_id: Authenticated user id (required).
    :type user_id: int | None
    :param old_password: Current password.
    :type old_password: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    user_id: int | None
    old_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens plus their expiry hints.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param access_expires_at: Access token expiry (cookie/header lifetime hint).
    :type access_expires_at: datetime
    :param refresh_expires_at: Refresh token expiry (cookie lifetime hint).
    :type refresh_expires_at: datetime
    """

    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe projection of a user (no hash, no refresh token).

    :param id: User id.
    :type id: int
    :param email: Login email.
    :type email: str
    :param full_name: Optional display name.
    :type full_name: str | None
    :param is_verified: Whether the email was verified.
    :type is_verified: bool
    """

    id: int
    email: str
    full_name: str | None
    is_verified: bool
