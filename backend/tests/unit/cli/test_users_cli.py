# tests/unit/cli/test_users_cli.py
from __future__ import annotations


def _invoke(app, *args):
    return app.test_cli_runner().invoke(args=["users", "create", *args])


def test_create_verified_user(app, services):
    result = _invoke(app, "--email", "Cli@Example.com", "--password", "Secret123", "--verified")

    assert result.exit_code == 0, result.output
    assert "Created verified user cli@example.com" in result.output
    user = services.sessions.users.find_by_email("cli@example.com")
    assert user.is_verified is True


def test_create_unverified_user_by_default(app, services):
    result = _invoke(app, "--email", "plain@example.com", "--password", "Secret123")

    assert result.exit_code == 0, result.output
    assert services.sessions.users.find_by_email("plain@example.com").is_verified is False


def test_duplicate_email_fails(app, services):
    _invoke(app, "--email", "dup@example.com", "--password", "Secret123")
    result = _invoke(app, "--email", "dup@example.com", "--password", "Secret123")

    assert result.exit_code != 0
    assert "Could not create user" in result.output
