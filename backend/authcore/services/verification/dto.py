# authcore/services/verification/dto.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SendChallengeIn:
    """
    Input DTO for requesting a verification code.

    :param email: Address of the account to verify.
    :type email: str
    """

    email: str


@dataclass(frozen=True, slots=True)
class VerifyChallengeIn:
    """
    Input DTO for submitting a verification code.

    :param email: Address of the account to verify.
    :type email: str
    :param code: Code as typed by the user; validated as exactly six digits.
    :type code: str
    """

    email: str
    code: str

