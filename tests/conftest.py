import os

# Settings are read once at import time, so the environment has to be in
# place before anything under ``portal`` is imported.
os.environ.update(
    {
        "ENVIRONMENT": "test",
        "DATABASE_URL": "sqlite://",
        "INIT_DB_ON_STARTUP": "false",
        "LOG_TO_FILE": "false",
        "LOG_LEVEL": "WARNING",
        "NOTIFICATION_BACKEND": "log",
        "JWT_SECRET_KEY": "test-secret-key-for-portal-tests",
        "USER_ROLES": "coordinator@x.org=admin,reviewer@x.org=approver",
        "APPROVAL_COORDINATOR_EMAILS": "adult-discipleship=adults@x.org",
    }
)

from typing import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from portal.api import deps  # noqa: E402
from portal.config import settings  # noqa: E402
from portal.core.security import Principal, Role, resolve_principal  # noqa: E402
from portal.db.base import Base  # noqa: E402
from portal.db.session import get_db  # noqa: E402
from portal.repositories import AnnouncementRepository, MinistryRepository  # noqa: E402
from portal.schemas.announcement import AnnouncementCreate  # noqa: E402
from portal.services.announcement import AnnouncementService  # noqa: E402
from portal.services.approval import ApprovalWorkflowService  # noqa: E402
from portal.services.ministry import MinistryService, ministry_directory  # noqa: E402
from portal.services.notification import (  # noqa: E402
    LoggingNotificationSender,
    NotificationDispatcher,
)

ADMIN_EMAIL = "coordinator@x.org"
APPROVER_EMAIL = "reviewer@x.org"


@pytest.fixture(autouse=True)
def _fresh_ministry_index():
    ministry_directory.invalidate()
    yield
    ministry_directory.invalidate()


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sender() -> LoggingNotificationSender:
    return LoggingNotificationSender()


@pytest.fixture
def ministry_service(db_session) -> MinistryService:
    return MinistryService(MinistryRepository(db_session), db_session, config=settings)


@pytest.fixture
def seeded(ministry_service) -> MinistryService:
    assert ministry_service.seed_default_ministries().is_success
    return ministry_service


@pytest.fixture
def announcement_service(db_session, sender) -> AnnouncementService:
    return AnnouncementService(
        AnnouncementRepository(db_session),
        db_session,
        ministry_repository=MinistryRepository(db_session),
        dispatcher=NotificationDispatcher(sender),
    )


@pytest.fixture
def workflow(db_session, sender) -> ApprovalWorkflowService:
    return ApprovalWorkflowService(
        AnnouncementRepository(db_session),
        db_session,
        NotificationDispatcher(sender),
        config=settings,
    )


@pytest.fixture
def admin() -> Principal:
    return Principal(email=ADMIN_EMAIL, role=Role.ADMIN)


@pytest.fixture
def approver() -> Principal:
    return resolve_principal(APPROVER_EMAIL, settings)


def make_form(**overrides) -> AnnouncementCreate:
    data = {
        "name": "Jane Doe",
        "email": "jane@x.org",
        "ministry": "Adult Bible Study",
        "eventDate": "2026-11-05",
        "eventTime": "7:00 PM",
        "promotionStart": "2026-10-25",
        "platforms": ["Email Blast", "Bulletin"],
        "announcementBody": "Join us for a new study on the Gospel of John.",
        "addToCalendar": True,
        "fileLinks": [],
    }
    data.update(overrides)
    return AnnouncementCreate.model_validate(data)


@pytest.fixture
def submit(announcement_service):
    """Submit a form through the intake service and return the stored record."""

    def _submit(**overrides):
        result = announcement_service.submit(make_form(**overrides))
        assert result.is_success, result
        return result.data

    return _submit


# --- HTTP ---------------------------------------------------------------------

@pytest.fixture
def client(session_factory, sender) -> Iterator[TestClient]:
    from portal.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[deps.get_notification_sender] = lambda: sender
    yield TestClient(app)
    app.dependency_overrides.clear()


def bearer(email: str) -> dict:
    token = deps.get_jwt_manager().create_access_token(email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict:
    return bearer(ADMIN_EMAIL)


@pytest.fixture
def approver_headers() -> dict:
    return bearer(APPROVER_EMAIL)


@pytest.fixture
def form():
    return make_form


@pytest.fixture
def auth_headers():
    return bearer
