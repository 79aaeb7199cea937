"""Shared API helpers for authentication, cookies and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from authcore.api.failures import raise_for_failure
from authcore.core.errors import Unauthorized
from authcore.services.sessions.dto import TokenPairOut
from authcore.wiring import get_services

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def read_access_token() -> str | None:
    """Return the access token from ``Authorization: Bearer`` or the cookie."""
    return _bearer_token() or request.cookies.get(ACCESS_COOKIE)


def read_refresh_token(body: dict[str, Any] | None = None) -> str | None:
    """Return the refresh token from the cookie, falling back to the JSON body."""
    token = request.cookies.get(REFRESH_COOKIE)
    if token:
        return token
    if body:
        return body.get("refresh_token")
    return None


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token and expose ``g.user_id``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = read_access_token()
        if not token:
            raise Unauthorized("Missing access token", code="missing_token")
        claims = raise_for_failure(get_services().sessions.authenticate_access(token))
        g.user_id = claims.user_id
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int | None:
    return getattr(g, "user_id", None)


# --------------------------------------------------------------------------- #
# Cookies
# --------------------------------------------------------------------------- #


def _max_age(expires_at: datetime, now: datetime) -> int:
    return max(0, int((expires_at - now).total_seconds()))


def set_session_cookies(response: Response, pair: TokenPairOut) -> Response:
    """Attach both tokens as HttpOnly cookies living as long as the tokens do."""
    now = get_services().clock.now()
    secure = bool(current_app.config.get("COOKIE_SECURE", False))
    for name, token, expires_at in (
        (ACCESS_COOKIE, pair.access_token, pair.access_expires_at),
        (REFRESH_COOKIE, pair.refresh_token, pair.refresh_expires_at),
    ):
        response.set_cookie(
            name,
            token,
            max_age=_max_age(expires_at, now),
            httponly=True,
            secure=secure,
            samesite="Lax",
        )
    return response


def clear_session_cookies(response: Response) -> Response:
    secure = bool(current_app.config.get("COOKIE_SECURE", False))
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, httponly=True, secure=secure, samesite="Lax")
    return response
