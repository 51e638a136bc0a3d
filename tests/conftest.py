"""
Pytest configuration and fixtures

Each test gets its own in-memory SQLite database. Outbound HTTP goes to a
MagicMock session, and the create trigger runs inline so the whole
registration workflow finishes before the request returns.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from onboarding.core.config import Settings, get_settings
from onboarding.db.base import Base
from onboarding.db.session import get_db
from onboarding.db.triggers import MemberCreatedTrigger
from onboarding.main import app
from onboarding.models import member  # noqa: F401  (registers the table)
from onboarding.services.member_store import MemberStore
from onboarding.services.notifications import NotificationDispatcher
from onboarding.services.registration import make_new_member_handler

API_SECRET = "s3cret"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        API_SECRET=API_SECRET,
        SENDGRID_API_KEY="sg-test-key",
        SENDGRID_TEMPLATE_ID="d-welcome",
        SENDGRID_FROM_EMAIL="execs@club.test",
        SENDGRID_FROM_NAME="Club Execs",
        SENDGRID_BASE_URL="https://sendgrid.test",
        WHITELIST_URL="http://whitelist.test/whitelist",
        LOG_FILE=None,
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

    yield factory

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    return MemberStore(db_session)


@pytest.fixture
def http():
    """Stand-in for requests.Session; every POST succeeds with 202"""
    session = MagicMock()
    session.post.return_value = MagicMock(status_code=202)
    return session


@pytest.fixture
def dispatcher(settings, http):
    return NotificationDispatcher(settings, http=http)


@pytest.fixture
def trigger(session_factory, dispatcher):
    trigger = MemberCreatedTrigger(
        session_factory,
        make_new_member_handler(session_factory, dispatcher),
    )
    trigger.install()
    yield trigger
    trigger.remove()


@pytest.fixture
def client(session_factory, settings, trigger):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(settings):
    return {settings.API_SECRET_HEADER: API_SECRET}


def sendgrid_calls(http):
    return [c for c in http.post.call_args_list if c.args[0].endswith("/v3/mail/send")]


def whitelist_calls(http):
    return [c for c in http.post.call_args_list if c.args[0] == "http://whitelist.test/whitelist"]
