"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction against an in-memory SQLite
database; application commits only release SAVEPOINTs, so data changes never
leak between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from authcore import wiring
from authcore.core.config import TestingConfig
from authcore.core.extensions import db as _db  # Flask-SQLAlchemy instance
from authcore.factory import create_app  # application factory under test
from authcore.services._shared.ports import (
    FrozenClock,
    InMemoryChallengeStore,
    InMemoryUserStore,
    RecordingMailer,
    StubOAuthExchange,
)
from authcore.services.tokens.codec import TokenCodec
from authcore.services.tokens.dto import TokenCodecConfig

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Fixed, distinct token secrets.
    - Never talks to SMTP, Redis or Google.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    ACCESS_TOKEN_SECRET = ACCESS_SECRET
    REFRESH_TOKEN_SECRET = REFRESH_SECRET
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
        engine = _db.engine
        if engine.dialect.name == "sqlite":
            # pysqlite emits no BEGIN on its own, which breaks SAVEPOINT
            # nesting; let SQLAlchemy control transactions explicitly.
            @event.listens_for(engine, "connect")
            def _do_connect(dbapi_connection, connection_record):
                dbapi_connection.isolation_level = None

            @event.listens_for(engine, "begin")
            def _do_begin(conn):
                conn.exec_driver_sql("BEGIN")

        _db.create_all()
    # Do not keep an app context pushed across test-client requests.
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(app, db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    with app.app_context():
        conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(app, db, connection):
    """Provide a SQLAlchemy session joined to a per-test outer transaction.

    Notes
    -----
    ``join_transaction_mode="create_savepoint"`` turns every ``commit()``
    issued by application code into a SAVEPOINT release, so the outer
    transaction can still be rolled back when the test ends.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(
        bind=connection, join_transaction_mode="create_savepoint", expire_on_commit=False
    )
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    with app.app_context():
        db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Service-level doubles -----------------------------------------------------
@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def oauth_exchange() -> StubOAuthExchange:
    return StubOAuthExchange()


@pytest.fixture()
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def challenge_store() -> InMemoryChallengeStore:
    return InMemoryChallengeStore()


@pytest.fixture()
def codec(clock) -> TokenCodec:
    return TokenCodec(
        config=TokenCodecConfig(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET),
        clock=clock,
    )


# -- HTTP level ----------------------------------------------------------------
@pytest.fixture()
def services(app, session, clock, mailer, oauth_exchange):
    """Rebuild the app's services around the SQL stores and the test doubles."""
    original = app.extensions.get(wiring.EXTENSION_KEY)
    built = wiring.init_app(app, clock=clock, mailer=mailer, oauth_exchange=oauth_exchange)
    try:
        yield built
    finally:
        app.extensions[wiring.EXTENSION_KEY] = original


@pytest.fixture()
def client(app, services):
    """Flask test client bound to the rewired services."""
    return app.test_client()
