# authcore/services/sessions/service.py
from __future__ import annotations

import logging
from typing import Any

from authcore.services._shared.base import BaseService, transient_as_failure
from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.passwords import hash_password, verify_password
from authcore.services._shared.ports.clock import Clock
from authcore.services._shared.ports.user_store import UserRecord, UserStore
from authcore.services.sessions.dto import (
    LoginIn,
    LogoutIn,
    PasswordChangeIn,
    RefreshIn,
    TokenPairOut,
    UserPublicOut,
)
from authcore.services.tokens.codec import TokenCodec
from authcore.services.tokens.dto import TokenClaims, TokenKind

log = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Session lifecycle service (login / refresh / logout / password change).

    Single active session model: each user has at most one valid refresh
    token, stored on the user record. Every successful operation issues a
    *pair* and overwrites the stored refresh token, which invalidates the
    previous one (single-use rotation). Access tokens are never persisted.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        codec: TokenCodec,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param users: User store (refresh token lives on the user record).
        :param codec: Token signer/verifier.
        :param clock: Time source; defaults to the codec's clock.
        """
        super().__init__(clock=clock or codec.clock)
        self.users = users
        self.codec = codec

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    @transient_as_failure
    def login(self, dto: LoginIn) -> TokenPairOut | Failure:
        """
        Authenticate credentials and issue a fresh token pair.

        :returns: Token pair, or ``NOT_FOUND`` / ``INVALID_CREDENTIALS``.
        """
        user = self.users.find_by_email(dto.email)
        if user is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found")

        if not verify_password(user.password_hash, dto.password):
            # Stored refresh token stays untouched on a failed attempt.
            return self.fail(FailureKind.INVALID_CREDENTIALS, "Invalid password", user_id=user.id)

        pair = self._issue_and_persist(user.id)
        if not isinstance(pair, Failure):
            log.info("session.login", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    @transient_as_failure
    def refresh(self, dto: RefreshIn) -> TokenPairOut | Failure:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - The token must verify (``EXPIRED`` / ``MALFORMED`` otherwise).
        - It must equal the token currently stored for the user; a superseded,
          logged-out or foreign token yields ``TOKEN_MISMATCH``.
        - Rotation is a compare-and-set on the stored value, so two concurrent
          refreshes with the same token cannot both succeed.
        """
        claims = self.codec.verify_kind(dto.refresh_token, TokenKind.REFRESH)
        if isinstance(claims, Failure):
            log.info("session.refresh_rejected", extra={"failure": claims.kind.value})
            return claims

        user = self.users.find_by_id(claims.user_id)
        if user is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found", user_id=claims.user_id)

        if user.refresh_token is None or dto.refresh_token != user.refresh_token:
            return self.fail(
                FailureKind.TOKEN_MISMATCH,
                "The provided refresh token is no longer valid",
                user_id=user.id,
            )

        access, refresh = self.codec.issue_pair(user.id)
        if not self.users.swap_refresh_token(user.id, dto.refresh_token, refresh.token):
            # Lost a race against another rotation/logout for the same user.
            return self.fail(
                FailureKind.TOKEN_MISMATCH,
                "The provided refresh token is no longer valid",
                user_id=user.id,
            )

        log.info("session.refreshed", extra={"user_id": user.id})
        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh.token,
            access_expires_at=access.expires_at,
            refresh_expires_at=refresh.expires_at,
        )

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    @transient_as_failure
    def logout(self, dto: LogoutIn) -> None:
        """
        Clear the stored refresh token. Idempotent.

        :raises PreconditionFailedError: If no authenticated user id is given.
        """
        user_id = self.require_user_id(dto.user_id)
        self.users.update(user_id, {"refresh_token": None})
        log.info("session.logout", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Password change
    # ------------------------------------------------------------------ #

    @transient_as_failure
    def change_password(self, dto: PasswordChangeIn) -> TokenPairOut | Failure:
        """
        Verify the old password, store the new hash and start a fresh session.

        Rotating the refresh token here invalidates sessions held by other
        devices.

        :raises PreconditionFailedError: If no authenticated user id is given.
        """
        user_id = self.require_user_id(dto.user_id)
        user = self.users.find_by_id(user_id)
        if user is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found", user_id=user_id)

        if not verify_password(user.password_hash, dto.old_password):
            return self.fail(
                FailureKind.INVALID_CREDENTIALS, "Invalid old password", user_id=user_id
            )

        pair = self._issue_and_persist(user.id, password_hash=hash_password(dto.new_password))
        if not isinstance(pair, Failure):
            log.info("session.password_changed", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Identity helpers used by the transport
    # ------------------------------------------------------------------ #

    def authenticate_access(self, access_token: str) -> TokenClaims | Failure:
        """Verify an access token (stateless; no store lookup)."""
        return self.codec.verify_kind(access_token, TokenKind.ACCESS)

    @transient_as_failure
    def current_user(self, user_id: int | None) -> UserPublicOut | Failure:
        """Return the public projection of the authenticated user."""
        uid = self.require_user_id(user_id)
        user = self.users.find_by_id(uid)
        if user is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found", user_id=uid)
        return to_public(user)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _issue_and_persist(self, user_id: int, **patch: Any) -> TokenPairOut | Failure:
        access, refresh = self.codec.issue_pair(user_id)
        updated = self.users.update(user_id, {**patch, "refresh_token": refresh.token})
        if updated is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found", user_id=user_id)
        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh.token,
            access_expires_at=access.expires_at,
            refresh_expires_at=refresh.expires_at,
        )


def to_public(user: UserRecord) -> UserPublicOut:
    """Map a :class:`UserRecord` to :class:`UserPublicOut`."""
    return UserPublicOut(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_verified=user.is_verified,
    )
