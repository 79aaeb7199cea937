# tests/unit/models/test_user_model.py
from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from authcore.models import OtpChallenge, User
from tests.factories.otp_challenge import OtpChallengeFactory
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


def test_email_is_normalized_on_assignment():
    user = User(email="  Mixed.Case@Example.COM ", password_hash="x")
    assert user.email == "mixed.case@example.com"


@pytest.mark.parametrize("bad", ["", "no-at-sign", "user@localhost"])
def test_malformed_email_is_rejected(bad):
    with pytest.raises(ValueError):
        User(email=bad, password_hash="x")


def test_password_is_write_only_and_hashed():
    user = UserFactory()

    assert user.password_hash != DEFAULT_PASSWORD
    assert user.verify_password(DEFAULT_PASSWORD)
    assert not user.verify_password("wrong")
    with pytest.raises(AttributeError):
        _ = user.password


def test_empty_password_rejected():
    user = User(email="a@example.com", password_hash="x")
    with pytest.raises(ValueError):
        user.password = ""


def test_new_users_start_unverified_without_session(session):
    user = UserFactory()
    session.refresh(user)

    assert user.is_verified is False
    assert user.refresh_token is None


def test_email_is_unique(session):
    UserFactory(email="dup@example.com")

    with pytest.raises(IntegrityError):
        UserFactory(email="DUP@example.com")
    session.rollback()


def test_challenge_is_reachable_from_user():
    challenge = OtpChallengeFactory(code=42)

    assert challenge.user.otp_challenge is challenge
    assert "user_id=" in repr(challenge)


def test_challenge_code_must_fit_six_digits(session):
    user = UserFactory()
    session.add(
        OtpChallenge(user_id=user.id, code=1_000_000, issued_at=datetime(2024, 1, 1, tzinfo=UTC))
    )

    with pytest.raises(IntegrityError):
        session.flush()
    session.rollback()
