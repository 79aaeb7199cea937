"""Pending email verification codes."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.core.extensions import db

from .base import ReprMixin

if TYPE_CHECKING:
    from .user import User


class OtpChallenge(ReprMixin, db.Model):
    """
    The single pending OTP challenge of a user.

    ``user_id`` is the primary key, so a resend replaces the row instead of
    adding a second one.

    Attributes
    ----------
    user_id:
        Owner user; the row disappears with the user.
    code:
        Six-digit code stored as an integer (``0`` .. ``999999``).
    issued_at:
        Instant the code was delivered (UTC).
    """

    __tablename__ = "otp_challenges"
    __repr_attrs__ = ("user_id", "issued_at")

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    code: Mapped[int] = mapped_column(Integer, nullable=False)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="otp_challenge")

    __table_args__ = (
        CheckConstraint("code >= 0 AND code <= 999999", name="code_range"),
    )
