# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.ports.challenge_store import ChallengeRecord, ChallengeStore

BACKEND = "redis"


@dataclass(slots=True)
class RedisChallengeStore(ChallengeStore):
    """
    Redis-backed OTP challenge store.

    One hash per user (``otp:challenge:{user_id}``) holding ``code`` and
    ``issued_at`` (epoch seconds). Writes are a single ``HSET`` + ``EXPIRE``
    transaction, so a resend atomically replaces the previous challenge.

    :param r: A Redis client (already connected).
    :param retention: Key lifetime. Must exceed the OTP expiry window so an
        expired challenge is still found (and reported as expired) on the next
        verification attempt; stale keys are reaped by Redis afterwards.
    """

    r: redis.Redis
    retention: timedelta = timedelta(hours=24)

    @staticmethod
    def _k(user_id: int) -> str:
        return f"otp:challenge:{user_id}"

    def get(self, user_id: int) -> ChallengeRecord | None:
        try:
            raw = self.r.hgetall(self._k(user_id))
        except RedisError as exc:
            raise StoreUnavailableError(BACKEND, "read failed") from exc
        if not raw:
            return None
        data = {_s(k): _s(v) for k, v in raw.items()}
        return ChallengeRecord(
            user_id=user_id,
            code=int(data["code"]),
            issued_at=datetime.fromtimestamp(float(data["issued_at"]), tz=UTC),
        )

    def upsert(self, user_id: int, code: int, issued_at: datetime) -> None:
        key = self._k(user_id)
        pipe = self.r.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(key, mapping={"code": str(code), "issued_at": str(issued_at.timestamp())})
        pipe.expire(key, max(1, int(self.retention.total_seconds())))
        try:
            pipe.execute()
        except RedisError as exc:
            raise StoreUnavailableError(BACKEND, "write failed") from exc

    def delete(self, user_id: int) -> None:
        try:
            self.r.delete(self._k(user_id))
        except RedisError as exc:
            raise StoreUnavailableError(BACKEND, "delete failed") from exc


def _s(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value
