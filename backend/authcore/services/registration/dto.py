"""
DTOs for RegistrationService.

Contracts for self-registration of a new, not yet verified account.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input payload for the registration process.

    :param email: Login email (will be normalized to lowercase+trim).
    :type email: str
    :param password: Raw password (hashed before it reaches the store).
    :type password: str
    :param full_name: Optional real name.
    :type full_name: str | None
    """

    email: str
    password: str
    full_name: str | None = None
