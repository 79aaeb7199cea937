"""SQL implementation of the :class:`UserStore` port."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from authcore.infra.sqlalchemy.errors import translate_db_errors
from authcore.models.user import User
from authcore.services._shared.ports.user_store import (
    UserRecord,
    UserStore,
    check_patch,
    normalize_email,
)
from authcore.uow import SQLAlchemyUnitOfWork


def to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        full_name=user.full_name,
        is_verified=bool(user.is_verified),
        refresh_token=user.refresh_token,
    )


class SqlUserStore(UserStore):
    """
    User store backed by the ``users`` table.

    Every call runs in its own unit of work and commits before returning,
    so records handed to services always reflect committed state.

    :param uow_factory: Callable returning a fresh unit of work.
    """

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork):
        self._uow = uow_factory

    def find_by_email(self, email: str) -> UserRecord | None:
        with translate_db_errors(), self._uow() as uow:
            user = uow.users.get_by_email(email)
            return to_record(user) if user is not None else None

    def find_by_id(self, user_id: int) -> UserRecord | None:
        with translate_db_errors(), self._uow() as uow:
            user = uow.users.get(user_id)
            return to_record(user) if user is not None else None

    def create(self, fields: Mapping[str, Any]) -> UserRecord:
        with translate_db_errors(), self._uow() as uow:
            user = User(
                email=normalize_email(str(fields["email"])),
                password_hash=fields["password_hash"],
                full_name=fields.get("full_name"),
                is_verified=bool(fields.get("is_verified", False)),
                refresh_token=fields.get("refresh_token"),
            )
            uow.users.add(user)
            return to_record(user)

    def update(self, user_id: int, patch: Mapping[str, Any]) -> UserRecord | None:
        changes = check_patch(patch)
        with translate_db_errors(), self._uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                return None
            uow.users.update(user, changes)
            return to_record(user)

    def swap_refresh_token(self, user_id: int, expected: str, replacement: str | None) -> bool:
        with translate_db_errors(), self._uow() as uow:
            return uow.users.swap_refresh_token(user_id, expected, replacement)
