"""
RegistrationService
===================

Creates a new credential record:

- Email is normalized and must be unused (``CONFLICT`` otherwise).
- The password is hashed here; the store never sees the raw value.
- New accounts start unverified and without a refresh token, so the first
  session is obtained through a regular login.
"""

from __future__ import annotations

import logging

from authcore.services._shared.base import BaseService, transient_as_failure
from authcore.services._shared.errors import ConflictError
from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.passwords import hash_password
from authcore.services._shared.ports.clock import Clock
from authcore.services._shared.ports.user_store import UserStore, normalize_email
from authcore.services.registration.dto import RegisterIn
from authcore.services.sessions.dto import UserPublicOut
from authcore.services.sessions.service import to_public

log = logging.getLogger(__name__)


class RegistrationService(BaseService):
    """Orchestrates the account registration process."""

    def __init__(self, *, users: UserStore, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self.users = users

    @transient_as_failure
    def register(self, dto: RegisterIn) -> UserPublicOut | Failure:
        """
        Register a user.

        :param dto: Registration input.
        :type dto: :class:`RegisterIn`
        :returns: Public-safe user payload, or ``Failure(CONFLICT)`` when the
            email is already in use.
        :rtype: :class:`UserPublicOut` | :class:`Failure`
        """
        norm_email = normalize_email(dto.email)

        if self.users.find_by_email(norm_email) is not None:
            return self.fail(FailureKind.CONFLICT, "Email already in use")

        try:
            user = self.users.create(
                {
                    "email": norm_email,
                    "password_hash": hash_password(dto.password),
                    "full_name": dto.full_name,
                    "is_verified": False,
                }
            )
        except ConflictError:
            # Lost a race with a concurrent registration of the same email.
            return self.fail(FailureKind.CONFLICT, "Email already in use")

        log.info("user.registered", extra={"user_id": user.id})
        return to_public(user)
