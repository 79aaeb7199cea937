"""Translation of SQLAlchemy exceptions into service-layer errors."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from authcore.services._shared.errors import ConflictError, StoreUnavailableError, violates

BACKEND = "sql"


def is_email_conflict(exc: IntegrityError) -> bool:
    # SQLite reports the column, PostgreSQL the constraint name.
    return violates(exc, "uq_users_email") or violates(exc, "users.email")


@contextmanager
def translate_db_errors() -> Iterator[None]:
    """
    Re-raise driver errors as :class:`ConflictError` (duplicate email) or
    :class:`StoreUnavailableError` (everything else).
    """
    try:
        yield
    except IntegrityError as exc:
        if is_email_conflict(exc):
            raise ConflictError("User", "email already in use") from exc
        raise StoreUnavailableError(BACKEND, "integrity error") from exc
    except SQLAlchemyError as exc:
        raise StoreUnavailableError(BACKEND, exc.__class__.__name__) from exc
