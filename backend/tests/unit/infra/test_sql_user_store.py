# tests/unit/infra/test_sql_user_store.py
from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from authcore.infra.sqlalchemy.user_store import SqlUserStore
from authcore.repositories.user import UserRepository
from authcore.services._shared.errors import ConflictError, StoreUnavailableError
from authcore.services._shared.ports import UserRecord
from tests.factories.user import UserFactory


@pytest.fixture()
def store() -> SqlUserStore:
    return SqlUserStore()


def test_create_and_find(store):
    created = store.create({"email": "New@Example.com", "password_hash": "h", "full_name": "N"})

    assert isinstance(created, UserRecord)
    assert created.email == "new@example.com"
    assert store.find_by_email("NEW@example.com") == created
    assert store.find_by_id(created.id) == created


def test_find_missing_returns_none(store):
    assert store.find_by_email("missing@example.com") is None
    assert store.find_by_id(123456) is None


def test_duplicate_email_raises_conflict(store):
    UserFactory(email="taken@example.com")

    with pytest.raises(ConflictError):
        store.create({"email": "taken@example.com", "password_hash": "h"})


def test_partial_update_leaves_other_fields(store):
    user = UserFactory(full_name="Keep Me")

    updated = store.update(user.id, {"refresh_token": "rt-1"})

    assert updated.refresh_token == "rt-1"
    assert updated.full_name == "Keep Me"
    assert updated.password_hash == user.password_hash


def test_update_rejects_unknown_fields(store):
    user = UserFactory()

    with pytest.raises(ValueError):
        store.update(user.id, {"email": "other@example.com"})


def test_update_missing_user_returns_none(store):
    assert store.update(987654, {"is_verified": True}) is None


def test_swap_refresh_token_is_compare_and_set(store):
    user = UserFactory(refresh_token="rt-1")

    assert store.swap_refresh_token(user.id, "rt-1", "rt-2") is True
    assert store.swap_refresh_token(user.id, "rt-1", "rt-3") is False
    assert store.find_by_id(user.id).refresh_token == "rt-2"


def test_swap_fails_when_no_token_stored(store):
    user = UserFactory(refresh_token=None)

    assert store.swap_refresh_token(user.id, "anything", "rt-2") is False


def test_database_outage_raises_store_unavailable(store, monkeypatch):
    def broken(self, email):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(UserRepository, "get_by_email", broken)

    with pytest.raises(StoreUnavailableError) as excinfo:
        store.find_by_email("any@example.com")
    assert excinfo.value.backend == "sql"
