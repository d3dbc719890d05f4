import os
import tempfile

# app.main builds a default app at import time and needs a signing secret
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RESUME_UPLOAD_DIR", tempfile.mkdtemp(prefix="resumes-"))

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.roles import OnboardingStatus, Role
from app.core.security import PasswordHasher
from app.main import create_app
from app.models.user import User
from app.services import auth_service

DEFAULT_PASSWORD = "Passw0rd123"


class RecordingMailer:
    """Collects outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, message):
        if self.fail:
            raise ConnectionError("SMTP relay unavailable")
        self.sent.append(message)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SECRET_KEY="test-secret-key",
        DATABASE_URL="sqlite://",
        RESUME_UPLOAD_DIR=str(tmp_path / "resumes"),
        FRONTEND_URL="http://portal.test",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    application.state.mailer = RecordingMailer()
    # Below the production floor, tests only
    application.state.password_hasher = PasswordHasher(4)
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def mailer(app):
    return app.state.mailer


@pytest.fixture
def database(app, client):
    # Depends on client so tables exist before any direct insert
    return app.state.database


@pytest.fixture
def hasher(app):
    return app.state.password_hasher


@pytest.fixture
def codec(app):
    return app.state.token_codec


@pytest.fixture
def make_user(database, hasher):
    """Insert a user directly and return a detached copy."""

    def _make_user(
        email,
        role=Role.JOB_SEEKER,
        password=DEFAULT_PASSWORD,
        is_super_admin=False,
        first_login=False,
        onboarding_status=None,
        created_by=None,
        **extra,
    ):
        if onboarding_status is None:
            onboarding_status = (
                OnboardingStatus.PENDING if role == Role.JOB_SEEKER else OnboardingStatus.COMPLETED
            )
        user = User(
            username=email.split("@")[0].replace(".", ""),
            email=email,
            password_hash=hasher.hash(password),
            role=role,
            is_super_admin=is_super_admin,
            first_login=first_login,
            onboarding_status=onboarding_status,
            created_by=created_by,
            **extra,
        )
        with database.session() as db:
            db.add(user)
            db.commit()
            db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers(codec):
    """Bearer header for a user, minted from its persisted state."""

    def _auth_headers(user):
        return {"Authorization": f"Bearer {auth_service.mint_token(codec, user)}"}

    return _auth_headers


@pytest.fixture
def fetch_user(database):
    def _fetch_user(user_id=None, email=None):
        with database.session() as db:
            if email is not None:
                return db.query(User).filter(User.email == email).first()
            return db.get(User, user_id)

    return _fetch_user


@pytest.fixture
def super_admin(make_user):
    return make_user("root@portal.test", role=Role.ADMIN, is_super_admin=True)


@pytest.fixture
def admin(make_user, super_admin):
    return make_user("ops@portal.test", role=Role.ADMIN, created_by=super_admin.id)


@pytest.fixture
def referrer(make_user, admin):
    return make_user("ref@portal.test", role=Role.JOB_REFERRER, created_by=admin.id)
