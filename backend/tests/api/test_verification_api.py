# tests/api/test_verification_api.py
from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time

from authcore import wiring
from authcore.services.verification.otp import format_code
from tests.factories.user import UserFactory

AUTH = "/api/v1/auth"
OTP = "/api/v1/auth/otp"
EMAIL = "grace@example.com"


@pytest.fixture()
def registered(client):
    resp = client.post(f"{AUTH}/register", json={"email": EMAIL, "password": "CorrectHorse1"})
    assert resp.status_code == 201
    return resp.get_json()["data"]


def _send(client, email=EMAIL):
    return client.post(f"{OTP}/send", json={"email": email})


def _verify(client, code, email=EMAIL):
    return client.post(f"{OTP}/verify", json={"email": email, "code": code})


def test_send_then_verify_marks_account_verified(client, registered, mailer):
    resp = _send(client)
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"sent": True}

    code = mailer.last_code
    assert len(code) == 6 and code.isdigit()

    resp = _verify(client, code)
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"verified": True}

    again = _send(client)
    assert again.status_code == 400
    assert again.get_json()["code"] == "already_verified"


def test_resend_is_throttled_for_sixty_seconds(client, registered, clock, mailer):
    assert _send(client).status_code == 200

    clock.advance(seconds=59)
    throttled = _send(client)
    assert throttled.status_code == 429
    assert throttled.get_json()["code"] == "throttled"

    clock.advance(seconds=1)
    assert _send(client).status_code == 200
    assert len(mailer.sent) == 2


def test_resend_replaces_code_and_success_is_single_use(client, registered, clock, mailer):
    _send(client)
    clock.advance(seconds=60)
    _send(client)
    assert len(mailer.sent) == 2

    assert _verify(client, mailer.last_code).status_code == 200
    replay = _verify(client, mailer.last_code)
    assert replay.status_code == 404
    assert replay.get_json()["code"] == "no_challenge"


def test_wrong_code_keeps_challenge(client, registered, mailer):
    _send(client)
    wrong = format_code((int(mailer.last_code) + 1) % 1_000_000)

    resp = _verify(client, wrong)
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "code_mismatch"

    assert _verify(client, mailer.last_code).status_code == 200


def test_expired_code_is_discarded(client, registered, clock, mailer):
    _send(client)
    clock.advance(minutes=5, seconds=1)

    expired = _verify(client, mailer.last_code)
    assert expired.status_code == 401
    assert expired.get_json()["code"] == "expired"

    gone = _verify(client, mailer.last_code)
    assert gone.status_code == 404
    assert gone.get_json()["code"] == "no_challenge"


@pytest.mark.parametrize("code", ["12345", "1234567", "12a456", " 123456"])
def test_code_format_checked_first(client, code):
    resp = _verify(client, code, email="nobody@example.com")

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "invalid_format"


def test_verify_without_challenge(client, registered):
    resp = _verify(client, "123456")

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "no_challenge"


def test_send_to_unknown_account(client):
    resp = _send(client, email="nobody@example.com")

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "not_found"


def test_delivery_failure_is_retryable_immediately(client, registered, mailer):
    mailer.fail = True
    resp = _send(client)
    assert resp.status_code == 503
    assert resp.get_json()["code"] == "service_unavailable"

    mailer.fail = False
    assert _send(client).status_code == 200


# --------------------------------------------------------------------------- #
# Wall-clock behaviour (SystemClock under freezegun)
# --------------------------------------------------------------------------- #


@pytest.fixture()
def wall_clock_client(app, session, mailer):
    original = app.extensions.get(wiring.EXTENSION_KEY)
    wiring.init_app(app, mailer=mailer)
    try:
        yield app.test_client()
    finally:
        app.extensions[wiring.EXTENSION_KEY] = original


def test_cooldown_uses_system_clock(wall_clock_client, session, mailer):
    UserFactory(email=EMAIL)
    session.commit()

    with freeze_time("2024-03-01 12:00:00") as frozen:
        assert _send(wall_clock_client).status_code == 200
        frozen.tick(timedelta(seconds=30))
        assert _send(wall_clock_client).status_code == 429
        frozen.tick(timedelta(seconds=30))
        assert _send(wall_clock_client).status_code == 200
        frozen.tick(timedelta(minutes=6))
        assert _verify(wall_clock_client, mailer.last_code).get_json()["code"] == "expired"
