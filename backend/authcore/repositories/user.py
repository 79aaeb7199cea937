"""User repository for persistence and refresh-token rotation."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult

from authcore.models.user import User
from authcore.repositories.base import BaseRepository
from authcore.services._shared.ports.user_store import UPDATABLE_FIELDS, normalize_email


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER signs tokens or checks passwords; it only stores what the
    services hand over.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        return set(UPDATABLE_FIELDS)

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    # ---------------------------- Session token ----------------------------

    def swap_refresh_token(self, user_id: int, expected: str, replacement: str | None) -> bool:
        """Atomically replace the stored refresh token if it still equals ``expected``.

        A single conditional ``UPDATE`` is used so two concurrent rotations of
        the same token cannot both match.

        :returns: ``True`` when exactly one row was updated.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=replacement)
            .execution_options(synchronize_session="fetch")
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount == 1
