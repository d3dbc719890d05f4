from datetime import datetime, timedelta, timezone

import pydantic
import pytest

from app.core.config import Settings
from app.core.roles import OnboardingStatus, Role
from app.models.user import User
from app.services import auth_service
from tests.conftest import DEFAULT_PASSWORD


def login(client, email, password=DEFAULT_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_and_redirect(client, codec, make_user):
    user = make_user("poster@example.com", role=Role.JOB_POSTER)

    resp = login(client, "Poster@Example.com ")
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["email"] == "poster@example.com"
    assert "passwordHash" not in data["user"]
    assert data["redirectTo"] == "/poster/dashboard"

    claims = codec.verify(data["token"])
    assert claims.id == user.id
    assert claims.role == Role.JOB_POSTER


def test_login_does_not_distinguish_unknown_email(client, make_user):
    make_user("known@example.com")
    wrong_password = login(client, "known@example.com", "nope12345")
    unknown = login(client, "ghost@example.com")

    assert wrong_password.status_code == unknown.status_code == 401
    assert wrong_password.json() == unknown.json()
    assert wrong_password.headers["www-authenticate"] == "Bearer"


def test_login_redirect_checks_first_login_before_onboarding(client, make_user):
    make_user("fresh@example.com", first_login=True)
    resp = login(client, "fresh@example.com")
    assert resp.json()["redirectTo"] == "/change-password"

    make_user("half@example.com", first_login=False)
    resp = login(client, "half@example.com")
    assert resp.json()["redirectTo"] == "/seeker/onboarding"


def test_login_trims_submitted_password(client, make_user):
    make_user("padded@example.com", role=Role.JOB_POSTER)
    assert login(client, "padded@example.com", f"  {DEFAULT_PASSWORD} ").status_code == 200


def test_login_missing_field_is_validation_error(client):
    resp = client.post("/api/auth/login", json={"email": "a@b.co"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"


def test_protected_route_requires_token(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Missing bearer token"


def test_protected_route_rejects_bad_header(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Missing bearer token"

    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401


def test_openapi_declares_bearer_scheme(client):
    schema = client.get("/openapi.json").json()
    scheme = schema["components"]["securitySchemes"]["OAuth2PasswordBearer"]
    assert scheme["type"] == "oauth2"
    assert scheme["flows"]["password"]["tokenUrl"] == "/api/auth/login"

    me = schema["paths"]["/api/auth/me"]["get"]
    assert {"OAuth2PasswordBearer": []} in me["security"]


def test_expired_token_is_unauthorized(client, codec, make_user):
    user = make_user("late@example.com")
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token = codec.issue(auth_service.claims_for(user), now=issued)

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_me_reflects_persisted_state(client, make_user, auth_headers):
    user = make_user("me@example.com", role=Role.JOB_REFERRER)
    resp = client.get("/api/auth/me", headers=auth_headers(user))
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user.id
    assert resp.json()["redirectTo"] == "/referrer/dashboard"


def test_change_password_clears_first_login_and_remints(client, codec, make_user, auth_headers, fetch_user):
    user = make_user("temp@example.com", role=Role.JOB_POSTER, first_login=True)

    resp = client.post(
        "/api/auth/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "BrandNew2024"},
        headers=auth_headers(user),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["firstLogin"] is False
    assert data["redirectTo"] == "/poster/dashboard"
    assert codec.verify(data["token"]).first_login is False
    assert fetch_user(user.id).first_login is False

    assert login(client, "temp@example.com", "BrandNew2024").status_code == 200
    assert login(client, "temp@example.com").status_code == 401


def test_change_password_keeps_seeker_on_onboarding(client, make_user, auth_headers):
    user = make_user("newseeker@example.com", first_login=True)
    resp = client.post(
        "/api/auth/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "BrandNew2024"},
        headers=auth_headers(user),
    )
    assert resp.status_code == 200
    assert resp.json()["redirectTo"] == "/seeker/onboarding"
    assert resp.json()["user"]["onboardingStatus"] == OnboardingStatus.PENDING.value


def test_change_password_trims_new_password(client, make_user, auth_headers):
    user = make_user("spaces@example.com", role=Role.JOB_POSTER, first_login=True)
    resp = client.post(
        "/api/auth/change-password",
        json={"currentPassword": f" {DEFAULT_PASSWORD}", "newPassword": "BrandNew2024  "},
        headers=auth_headers(user),
    )
    assert resp.status_code == 200
    assert login(client, "spaces@example.com", "BrandNew2024").status_code == 200


def test_change_password_rejects_wrong_current(client, make_user, auth_headers):
    user = make_user("wrongcur@example.com", first_login=True)
    resp = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "Incorrect99", "newPassword": "BrandNew2024"},
        headers=auth_headers(user),
    )
    assert resp.status_code == 401


def test_change_password_enforces_policy(client, make_user, auth_headers):
    user = make_user("weak@example.com", first_login=True)
    resp = client.post(
        "/api/auth/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "short"},
        headers=auth_headers(user),
    )
    assert resp.status_code == 400
    assert "at least 8 characters" in resp.json()["detail"]


def test_deleted_user_token_no_longer_resolves(client, make_user, auth_headers, database):
    user = make_user("gone@example.com")
    headers = auth_headers(user)
    with database.session() as db:
        db.delete(db.get(User, user.id))
        db.commit()

    assert client.get("/api/auth/me", headers=headers).status_code == 404


def test_blank_secret_is_a_configuration_error():
    with pytest.raises(pydantic.ValidationError):
        Settings(SECRET_KEY="   ")


def test_bcrypt_cost_has_production_floor():
    with pytest.raises(pydantic.ValidationError):
        Settings(SECRET_KEY="test-secret-key", BCRYPT_ROUNDS=4)
    assert Settings(SECRET_KEY="test-secret-key", BCRYPT_ROUNDS=10).BCRYPT_ROUNDS == 10
