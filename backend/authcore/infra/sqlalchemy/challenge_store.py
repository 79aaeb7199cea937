"""SQL implementation of the :class:`ChallengeStore` port."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from authcore.infra.sqlalchemy.errors import translate_db_errors
from authcore.services._shared.ports.challenge_store import ChallengeRecord, ChallengeStore
from authcore.uow import SQLAlchemyUnitOfWork


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime(timezone=True) columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SqlChallengeStore(ChallengeStore):
    """Challenge store backed by the ``otp_challenges`` table (one row per user)."""

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork):
        self._uow = uow_factory

    def get(self, user_id: int) -> ChallengeRecord | None:
        with translate_db_errors(), self._uow() as uow:
            row = uow.challenges.get(user_id)
            if row is None:
                return None
            return ChallengeRecord(
                user_id=row.user_id, code=row.code, issued_at=_as_utc(row.issued_at)
            )

    def upsert(self, user_id: int, code: int, issued_at: datetime) -> None:
        with translate_db_errors(), self._uow() as uow:
            uow.challenges.upsert(user_id, code, issued_at)

    def delete(self, user_id: int) -> None:
        with translate_db_errors(), self._uow() as uow:
            uow.challenges.delete_by_user_id(user_id)
