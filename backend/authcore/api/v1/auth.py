"""Authentication and session endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from authcore.api.deps import (
    clear_session_cookies,
    current_user_id,
    json_response,
    read_refresh_token,
    require_auth,
    set_session_cookies,
    timing,
)
from authcore.api.failures import raise_for_failure
from authcore.core.errors import Unauthorized
from authcore.core.extensions import limiter
from authcore.schemas import (
    LoginSchema,
    OAuthCallbackQuerySchema,
    PasswordChangeSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)
from authcore.services.registration.dto import RegisterIn
from authcore.services.sessions.dto import LoginIn, LogoutIn, PasswordChangeIn, RefreshIn
from authcore.wiring import get_services

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
password_schema = PasswordChangeSchema()
oauth_query_schema = OAuthCallbackQuerySchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Create an unverified account."""

    data = register_schema.load(request.get_json(silent=True) or {})
    user = raise_for_failure(get_services().registration.register(RegisterIn(**data)))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and start a session (tokens in body and cookies)."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = raise_for_failure(get_services().sessions.login(LoginIn(**data)))
    response = json_response({"data": token_schema.dump(pair)})
    return set_session_cookies(response, pair)


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh token and issue a new pair."""

    body = refresh_schema.load(request.get_json(silent=True) or {})
    token = read_refresh_token(body)
    if not token:
        raise Unauthorized("Missing refresh token", code="missing_token")
    pair = raise_for_failure(get_services().sessions.refresh(RefreshIn(refresh_token=token)))
    response = json_response({"data": token_schema.dump(pair)})
    return set_session_cookies(response, pair)


@bp.post("/logout")
@require_auth
@timing
def logout():
    """End the current session and clear the cookies."""

    raise_for_failure(get_services().sessions.logout(LogoutIn(user_id=current_user_id())))
    response = json_response({"data": {"logged_out": True}})
    return clear_session_cookies(response)


@bp.post("/password")
@require_auth
@timing
def change_password():
    """Change the password and start a fresh session."""

    data = password_schema.load(request.get_json(silent=True) or {})
    pair = raise_for_failure(
        get_services().sessions.change_password(
            PasswordChangeIn(user_id=current_user_id(), **data)
        )
    )
    response = json_response({"data": token_schema.dump(pair)})
    return set_session_cookies(response, pair)


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    user = raise_for_failure(get_services().sessions.current_user(current_user_id()))
    return json_response({"data": user_schema.dump(user)})


@bp.get("/oauth/google/callback")
@timing
def google_callback():
    """Exchange the Google authorization code and acknowledge receipt.

    No local account is created or linked from the provider tokens.
    """

    query = oauth_query_schema.load(request.args)
    raise_for_failure(get_services().oauth.acknowledge(query["code"]))
    return json_response({"data": {"received": True}})
