import pytest

from app.core import errors
from app.core.roles import OnboardingStatus, Role
from app.core.security import TokenClaims
from app.models.user import User
from app.services import authorization
from app.services.user_lifecycle import seed_super_admin


def claims(role, user_id="u1", is_super_admin=False):
    return TokenClaims(
        id=user_id,
        email=f"{user_id}@example.com",
        role=role,
        first_login=False,
        is_super_admin=is_super_admin,
        onboarding_status=OnboardingStatus.COMPLETED,
    )


def test_authorize_by_role():
    poster = claims(Role.JOB_POSTER)
    assert authorization.authorize(poster, authorization.JOB_MANAGERS) is poster
    with pytest.raises(errors.Forbidden):
        authorization.authorize(poster, authorization.ADMINS)


def test_ownership_admin_bypass():
    authorization.check_ownership("someone-else", claims(Role.ADMIN))
    authorization.check_ownership(None, claims(Role.ADMIN))


def test_ownership_requires_matching_owner():
    poster = claims(Role.JOB_POSTER, "p1")
    authorization.check_ownership("p1", poster)
    with pytest.raises(errors.Forbidden):
        authorization.check_ownership("p2", poster)
    with pytest.raises(errors.Forbidden):
        authorization.check_ownership(None, poster)


@pytest.mark.parametrize("role", [Role.JOB_POSTER, Role.JOB_SEEKER, Role.JOB_REFERRER])
def test_regular_admin_assignable_roles(role):
    authorization.check_can_assign(claims(Role.ADMIN), role, False)


def test_regular_admin_cannot_grant_admin_or_super():
    actor = claims(Role.ADMIN)
    with pytest.raises(errors.Forbidden):
        authorization.check_can_assign(actor, Role.ADMIN, False)
    with pytest.raises(errors.Forbidden):
        authorization.check_can_assign(actor, Role.ADMIN, True)


def test_hierarchy():
    regular = claims(Role.ADMIN, "a1")
    root = claims(Role.ADMIN, "r1", is_super_admin=True)

    with pytest.raises(errors.Forbidden):
        authorization.check_can_manage(regular, "a1", False)
    with pytest.raises(errors.Forbidden):
        authorization.check_can_manage(regular, "r1", True)
    authorization.check_can_manage(regular, "x1", False)
    authorization.check_can_manage(root, "r2", True)
    with pytest.raises(errors.Forbidden):
        authorization.check_can_manage(root, "r1", True)


def test_seed_super_admin_runs_once(database, hasher):
    with database.session() as db:
        first = seed_super_admin(db, hasher, "Founder@Example.com", "Bootstrap123")
        assert first.is_super_admin is True
        assert first.role == Role.ADMIN
        assert first.first_login is True
        assert first.email == "founder@example.com"

        assert seed_super_admin(db, hasher, "second@example.com", "Bootstrap123") is None
        assert db.query(User).count() == 1


def test_seeded_super_admin_must_change_password(client, database, hasher):
    with database.session() as db:
        seed_super_admin(db, hasher, "boot@portal.test", "Bootstrap123")

    resp = client.post("/api/auth/login", json={"email": "boot@portal.test", "password": "Bootstrap123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["firstLogin"] is True
    assert resp.json()["redirectTo"] == "/change-password"
