"""Repository package exposing persistence-layer access for the credential models."""

from __future__ import annotations

from authcore.repositories.base import BaseRepository
from authcore.repositories.otp_challenge import OtpChallengeRepository
from authcore.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "OtpChallengeRepository",
    "UserRepository",
]
