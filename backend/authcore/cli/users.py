"""Flask CLI commands for bootstrapping accounts in development."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authcore.services._shared.failures import Failure
from authcore.services._shared.ports.user_store import normalize_email
from authcore.services.registration.dto import RegisterIn
from authcore.wiring import get_services

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Account management commands."""


@users_cli.command("create")
@click.option("--email", required=True, help="Login email of the new account.")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Initial password.")
@click.option("--full-name", default=None, help="Optional display name.")
@click.option("--verified", is_flag=True, help="Mark the account as already verified.")
@with_appcontext
def create_command(email: str, password: str, full_name: str | None, verified: bool) -> None:
    """Register an account, optionally skipping email verification."""
    services = get_services()
    result = services.registration.register(
        RegisterIn(email=email, password=password, full_name=full_name)
    )
    if isinstance(result, Failure):
        raise click.ClickException(f"Could not create user: {result.message}")

    if verified:
        users = services.sessions.users
        users.update(result.id, {"is_verified": True})
        LOGGER.info("cli.user_verified", extra={"user_id": result.id})

    state = "verified" if verified else "unverified"
    click.echo(f"Created {state} user {normalize_email(email)} (id={result.id})")
