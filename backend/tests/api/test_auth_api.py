# tests/api/test_auth_api.py
"""End-to-end tests of the session endpoints through the Flask test client."""

from __future__ import annotations

import pytest

AUTH = "/api/v1/auth"
EMAIL = "ada@example.com"
PASSWORD = "CorrectHorse1"


def _register(client, email=EMAIL, password=PASSWORD):
    return client.post(
        f"{AUTH}/register", json={"email": email, "password": password, "full_name": "Ada"}
    )


def _login(client, email=EMAIL, password=PASSWORD):
    return client.post(f"{AUTH}/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def bare_client(app, services):
    """Client without a cookie jar, so tokens travel only in headers/bodies."""
    return app.test_client(use_cookies=False)


@pytest.fixture()
def tokens(client):
    assert _register(client).status_code == 201
    resp = _login(client)
    assert resp.status_code == 200
    return resp.get_json()["data"]


# --------------------------------------------------------------------------- #
# Registration
# --------------------------------------------------------------------------- #


def test_register_returns_public_projection(client):
    resp = _register(client, email="  New@Example.com ")

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["email"] == "new@example.com"
    assert data["is_verified"] is False
    assert "password_hash" not in data
    assert "refresh_token" not in data


def test_register_duplicate_email_conflicts(client):
    _register(client)
    resp = _register(client, email=EMAIL.upper())

    assert resp.status_code == 409
    assert resp.get_json()["code"] == "conflict"


def test_register_validates_payload(client):
    resp = client.post(f"{AUTH}/register", json={"email": "not-an-email", "password": "short"})

    assert resp.status_code == 422
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert set(body["details"]["errors"]) == {"email", "password"}


# --------------------------------------------------------------------------- #
# Login
# --------------------------------------------------------------------------- #


def test_login_returns_pair_and_sets_http_only_cookies(client):
    _register(client)

    resp = _login(client)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"] != data["refresh_token"]
    cookies = resp.headers.getlist("Set-Cookie")
    access = next(c for c in cookies if c.startswith("accessToken="))
    refresh = next(c for c in cookies if c.startswith("refreshToken="))
    for cookie in (access, refresh):
        assert "HttpOnly" in cookie
        assert "SameSite=Lax" in cookie
    assert "Max-Age=900" in access


def test_login_unknown_email(client):
    resp = _login(client, email="ghost@example.com")

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "not_found"


def test_login_wrong_password(client):
    _register(client)

    resp = _login(client, password="WrongHorse1")

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "invalid_credentials"


# --------------------------------------------------------------------------- #
# Access tokens
# --------------------------------------------------------------------------- #


def test_me_with_bearer_header(bare_client, client, tokens):
    resp = bare_client.get(f"{AUTH}/me", headers=_bearer(tokens["access_token"]))

    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == EMAIL


def test_me_with_cookie(client, tokens):
    resp = client.get(f"{AUTH}/me")

    assert resp.status_code == 200


def test_me_without_token(bare_client):
    resp = bare_client.get(f"{AUTH}/me")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "missing_token"


def test_refresh_token_is_not_an_access_token(bare_client, tokens):
    resp = bare_client.get(f"{AUTH}/me", headers=_bearer(tokens["refresh_token"]))

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "malformed"


def test_access_token_expires(bare_client, tokens, clock):
    clock.advance(minutes=15)

    resp = bare_client.get(f"{AUTH}/me", headers=_bearer(tokens["access_token"]))

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "expired"


# --------------------------------------------------------------------------- #
# Refresh rotation
# --------------------------------------------------------------------------- #


def test_refresh_from_cookie_rotates(client, tokens):
    resp = client.post(f"{AUTH}/refresh")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["refresh_token"] != tokens["refresh_token"]


def test_refresh_token_is_single_use(bare_client, tokens):
    first = bare_client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
    replay = bare_client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert first.status_code == 200
    assert replay.status_code == 401
    assert replay.get_json()["code"] == "token_mismatch"

    rotated = first.get_json()["data"]["refresh_token"]
    again = bare_client.post(f"{AUTH}/refresh", json={"refresh_token": rotated})
    assert again.status_code == 200


def test_refresh_without_token(bare_client):
    resp = bare_client.post(f"{AUTH}/refresh", json={})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "missing_token"


def test_expired_refresh_token(bare_client, tokens, clock):
    clock.advance(days=30)

    resp = bare_client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "expired"


# --------------------------------------------------------------------------- #
# Logout
# --------------------------------------------------------------------------- #


def test_logout_clears_cookies_and_revokes_refresh(client, bare_client, tokens):
    resp = client.post(f"{AUTH}/logout")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"logged_out": True}
    cleared = resp.headers.getlist("Set-Cookie")
    assert any(c.startswith("refreshToken=;") and "Max-Age=0" in c for c in cleared)

    replay = bare_client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401
    assert replay.get_json()["code"] == "token_mismatch"


def test_logout_is_idempotent(bare_client, tokens):
    headers = _bearer(tokens["access_token"])

    assert bare_client.post(f"{AUTH}/logout", headers=headers).status_code == 200
    assert bare_client.post(f"{AUTH}/logout", headers=headers).status_code == 200


def test_logout_requires_authentication(bare_client):
    assert bare_client.post(f"{AUTH}/logout").status_code == 401


# --------------------------------------------------------------------------- #
# Password change
# --------------------------------------------------------------------------- #


def test_password_change_starts_fresh_session(bare_client, client, tokens):
    resp = bare_client.post(
        f"{AUTH}/password",
        headers=_bearer(tokens["access_token"]),
        json={"old_password": PASSWORD, "new_password": "BatteryStaple2"},
    )

    assert resp.status_code == 200
    assert resp.get_json()["data"]["refresh_token"] != tokens["refresh_token"]

    stale = bare_client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert stale.get_json()["code"] == "token_mismatch"
    assert _login(bare_client).status_code == 400
    assert _login(bare_client, password="BatteryStaple2").status_code == 200


def test_password_change_wrong_old_password(bare_client, tokens):
    resp = bare_client.post(
        f"{AUTH}/password",
        headers=_bearer(tokens["access_token"]),
        json={"old_password": "nope", "new_password": "BatteryStaple2"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "invalid_credentials"


# --------------------------------------------------------------------------- #
# OAuth callback
# --------------------------------------------------------------------------- #


def test_google_callback_acknowledges_valid_code(client, oauth_exchange):
    resp = client.get(f"{AUTH}/oauth/google/callback?code=good-code&state=xyz")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"received": True}
    assert oauth_exchange.calls == ["good-code"]


def test_google_callback_rejected_code(client):
    resp = client.get(f"{AUTH}/oauth/google/callback?code=bad")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "malformed"


def test_google_callback_requires_code(client, oauth_exchange):
    resp = client.get(f"{AUTH}/oauth/google/callback")

    assert resp.status_code == 422
    assert oauth_exchange.calls == []
