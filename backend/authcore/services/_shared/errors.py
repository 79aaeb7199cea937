"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. Business-rule outcomes (wrong password, expired code, ...) are *not*
exceptions: they are returned as :class:`~authcore.services._shared.failures.Failure`
values. The classes below cover the remaining cases:

- programming errors at a service seam (:class:`PreconditionFailedError`);
- infrastructure faults raised by store adapters (:class:`StoreUnavailableError`),
  which services convert into ``Failure(TRANSIENT)``;
- persistence-level conflicts raised by adapters (:class:`ConflictError`).
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Database constraint name (e.g. ``'uq_users_email'``).
    :returns: ``True`` if the error message mentions the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer decides how (and whether) to expose them.
    """


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised by adapters when a unique constraint rejects a write.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class PreconditionFailedError(ServiceError):
    """
    Raised when a service is invoked without a required precondition,
    e.g. a session operation called without an authenticated user id.
    """

    def __init__(self, message: str = "Precondition failed") -> None:
        super().__init__(message)


class StoreUnavailableError(ServiceError):
    """
    Raised by store/mail/OAuth adapters when the backing system cannot be reached.

    The original driver exception is chained as ``__cause__``.
    """

    def __init__(self, backend: str, message: str = "backend unavailable") -> None:
        super().__init__(f"{backend}: {message}")
        self.backend = backend
