from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from authcore.services._shared.errors import PreconditionFailedError, StoreUnavailableError
from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.ports.clock import Clock, SystemClock

P = ParamSpec("P")
R = TypeVar("R")

log = logging.getLogger(__name__)


def transient_as_failure(fn: Callable[P, R]) -> Callable[P, R | Failure]:
    """
    Turn :class:`StoreUnavailableError` raised by a collaborator into
    ``Failure(TRANSIENT)``. Nothing is retried here.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | Failure:
        try:
            return fn(*args, **kwargs)
        except StoreUnavailableError as exc:
            log.warning("collaborator.unavailable", extra={"failure": str(exc)})
            return Failure(FailureKind.TRANSIENT, "Service temporarily unavailable")

    return wrapper


class BaseService:
    """
    Base class for the credential services.

    Responsibilities
    ----------------
    * Hold the injected :class:`Clock` so time-based rules stay deterministic.
    * Offer shared guard helpers.

    Notes
    -----
    - Services are stateless between calls; all state lives in the stores.
    - Instances are built once per application and shared across requests.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        """
        Initialize the base service.

        :param clock: Time source; defaults to :class:`SystemClock`.
        """
        self.clock = clock or SystemClock()

    def now_utc(self):
        return self.clock.now()

    @staticmethod
    def require_user_id(user_id: Any) -> int:
        """
        Ensure an authenticated user id was supplied.

        :raises PreconditionFailedError: If ``user_id`` is missing.
        """
        if user_id is None or user_id == "":
            raise PreconditionFailedError("An authenticated user id is required.")
        return int(user_id)

    @staticmethod
    def fail(kind: FailureKind, message: str, **log_extra: Any) -> Failure:
        """Build a :class:`Failure` and log it at INFO level."""
        log.info("service.failure", extra={"failure": kind.value, **log_extra})
        return Failure(kind, message)
