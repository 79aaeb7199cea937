"""Repository for pending OTP challenges."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import InstrumentedAttribute

from authcore.models.otp_challenge import OtpChallenge
from authcore.repositories.base import BaseRepository


_UPSERT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class OtpChallengeRepository(BaseRepository[OtpChallenge]):
    """Persistence-only repository for :class:`OtpChallenge` (keyed by user id)."""

    model = OtpChallenge

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return OtpChallenge.user_id

    def _updatable_fields(self) -> set[str]:
        return {"code", "issued_at"}

    def upsert(self, user_id: int, code: int, issued_at: datetime) -> OtpChallenge:
        """Create or replace the challenge of ``user_id`` inside the current transaction.

        On PostgreSQL and SQLite this is one ``INSERT .. ON CONFLICT DO UPDATE``,
        so two first sends racing for the same user both succeed and the later
        write wins. Other dialects fall back to read-then-write.
        """
        insert = _UPSERT_INSERTS.get(self.session.get_bind(mapper=OtpChallenge).dialect.name)
        if insert is None:
            existing = self.get(user_id)
            if existing is None:
                return self.add(OtpChallenge(user_id=user_id, code=code, issued_at=issued_at))
            return self.update(existing, {"code": code, "issued_at": issued_at})

        stmt = insert(OtpChallenge).values(user_id=user_id, code=code, issued_at=issued_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[OtpChallenge.user_id],
            set_={"code": stmt.excluded.code, "issued_at": stmt.excluded.issued_at},
        )
        self.session.execute(stmt)
        return self.session.get(OtpChallenge, user_id, populate_existing=True)

    def delete_by_user_id(self, user_id: int) -> None:
        """Delete the challenge if present; missing rows are not an error."""
        self.session.execute(delete(OtpChallenge).where(OtpChallenge.user_id == user_id))
