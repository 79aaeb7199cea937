"""Translate service :class:`Failure` values into HTTP problem errors."""

from __future__ import annotations

from http import HTTPStatus
from typing import TypeVar

from authcore.core.errors import (
    APIError,
    Conflict,
    NotFound,
    ServiceUnavailable,
    TooManyRequests,
    Unauthorized,
)
from authcore.services._shared.failures import Failure, FailureKind

T = TypeVar("T")

#: FailureKind -> HTTP status. The transport is the only layer that knows this.
STATUS_BY_KIND: dict[FailureKind, int] = {
    FailureKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    FailureKind.INVALID_CREDENTIALS: HTTPStatus.BAD_REQUEST,
    FailureKind.ALREADY_VERIFIED: HTTPStatus.BAD_REQUEST,
    FailureKind.THROTTLED: HTTPStatus.TOO_MANY_REQUESTS,
    FailureKind.INVALID_FORMAT: HTTPStatus.BAD_REQUEST,
    FailureKind.NO_CHALLENGE: HTTPStatus.NOT_FOUND,
    FailureKind.EXPIRED: HTTPStatus.UNAUTHORIZED,
    FailureKind.CODE_MISMATCH: HTTPStatus.UNAUTHORIZED,
    FailureKind.TOKEN_MISMATCH: HTTPStatus.UNAUTHORIZED,
    FailureKind.MALFORMED: HTTPStatus.UNAUTHORIZED,
    FailureKind.CONFLICT: HTTPStatus.CONFLICT,
    FailureKind.TRANSIENT: HTTPStatus.SERVICE_UNAVAILABLE,
}


def to_api_error(failure: Failure) -> APIError:
    code = failure.kind.value
    status = STATUS_BY_KIND[failure.kind]
    if status == HTTPStatus.NOT_FOUND:
        return NotFound(failure.message, code=code)
    if status == HTTPStatus.UNAUTHORIZED:
        return Unauthorized(failure.message, code=code)
    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return TooManyRequests(failure.message, code=code)
    if status == HTTPStatus.CONFLICT:
        return Conflict(failure.message)
    if status == HTTPStatus.SERVICE_UNAVAILABLE:
        return ServiceUnavailable(failure.message)
    return APIError(failure.message, status_code=status, code=code)


def raise_for_failure(result: T | Failure) -> T:
    """Return ``result`` unchanged, or raise the matching :class:`APIError`."""
    if isinstance(result, Failure):
        raise to_api_error(result)
    return result
