# tests/unit/infra/test_sql_challenge_store.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from authcore.infra.sqlalchemy.challenge_store import SqlChallengeStore
from authcore.services._shared.ports import ChallengeRecord
from tests.factories.otp_challenge import OtpChallengeFactory
from tests.factories.user import UserFactory

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def store() -> SqlChallengeStore:
    return SqlChallengeStore()


def test_upsert_then_get_roundtrips_aware_timestamp(store):
    user = UserFactory()

    store.upsert(user.id, 42, T0)
    record = store.get(user.id)

    assert record == ChallengeRecord(user_id=user.id, code=42, issued_at=T0)
    assert record.issued_at.tzinfo is not None


def test_upsert_replaces_existing_row(store, session):
    challenge = OtpChallengeFactory(code=111111, issued_at=T0)

    store.upsert(challenge.user_id, 222222, T0 + timedelta(minutes=1))

    record = store.get(challenge.user_id)
    assert record.code == 222222
    assert record.issued_at == T0 + timedelta(minutes=1)


def test_delete_is_idempotent(store):
    challenge = OtpChallengeFactory()

    store.delete(challenge.user_id)
    store.delete(challenge.user_id)

    assert store.get(challenge.user_id) is None


def test_get_missing(store):
    assert store.get(424242) is None
