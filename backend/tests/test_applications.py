import pytest

from app.core.roles import OnboardingStatus, Role
from app.models.user import User


@pytest.fixture
def poster(make_user):
    return make_user("poster.a@example.com", role=Role.JOB_POSTER)


@pytest.fixture
def other_poster(make_user):
    return make_user("poster.b@example.com", role=Role.JOB_POSTER)


@pytest.fixture
def ready_seeker(make_user):
    return make_user("ready@example.com", onboarding_status=OnboardingStatus.COMPLETED)


@pytest.fixture
def job(client, poster, auth_headers):
    resp = client.post(
        "/api/jobs",
        json={"title": "Backend Engineer", "description": "APIs"},
        headers=auth_headers(poster),
    )
    assert resp.status_code == 201
    return resp.json()


def apply(client, headers, job_id):
    return client.post(f"/api/jobs/{job_id}/apply", headers=headers)


def test_job_is_owned_by_poster(job, poster):
    assert job["postedBy"] == poster.id


def test_job_requires_title(client, poster, auth_headers):
    resp = client.post("/api/jobs", json={"title": "  "}, headers=auth_headers(poster))
    assert resp.status_code == 400


def test_seekers_cannot_post_jobs(client, ready_seeker, auth_headers):
    resp = client.post("/api/jobs", json={"title": "Nope"}, headers=auth_headers(ready_seeker))
    assert resp.status_code == 403


def test_ready_seeker_applies_once(client, job, ready_seeker, auth_headers):
    headers = auth_headers(ready_seeker)
    first = apply(client, headers, job["id"])
    assert first.status_code == 201
    assert first.json()["status"] == "pending"
    assert first.json()["applicantId"] == ready_seeker.id

    second = apply(client, headers, job["id"])
    assert second.status_code == 409


@pytest.mark.parametrize(
    "first_login,status,detail",
    [
        (True, OnboardingStatus.PENDING, "password_change_required"),
        (True, OnboardingStatus.COMPLETED, "password_change_required"),
        (False, OnboardingStatus.PENDING, "onboarding_required"),
    ],
)
def test_apply_is_gated_on_account_state(client, job, make_user, auth_headers, first_login, status, detail):
    seeker = make_user("gated@example.com", first_login=first_login, onboarding_status=status)
    resp = apply(client, auth_headers(seeker), job["id"])
    assert resp.status_code == 403
    assert resp.json()["detail"] == detail


def test_apply_checks_persisted_state_not_token(client, job, make_user, auth_headers, database):
    seeker = make_user("stale@example.com", onboarding_status=OnboardingStatus.COMPLETED)
    headers = auth_headers(seeker)
    with database.session() as db:
        db.get(User, seeker.id).first_login = True
        db.commit()

    assert apply(client, headers, job["id"]).status_code == 403


def test_apply_unknown_job(client, ready_seeker, auth_headers):
    assert apply(client, auth_headers(ready_seeker), "missing").status_code == 404


# ============== Ownership ==============


@pytest.fixture
def application(client, job, ready_seeker, auth_headers):
    return apply(client, auth_headers(ready_seeker), job["id"]).json()


def test_owner_updates_status(client, application, poster, auth_headers):
    resp = client.patch(
        f"/api/applications/{application['id']}",
        json={"status": "interview"},
        headers=auth_headers(poster),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "interview"


def test_other_poster_is_forbidden(client, application, other_poster, auth_headers):
    resp = client.patch(
        f"/api/applications/{application['id']}",
        json={"status": "rejected"},
        headers=auth_headers(other_poster),
    )
    assert resp.status_code == 403


def test_admin_bypasses_ownership(client, application, admin, auth_headers):
    resp = client.patch(
        f"/api/applications/{application['id']}",
        json={"status": "accepted"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200


@pytest.mark.parametrize("body", [{"status": "hired"}, {}])
def test_invalid_status(client, application, poster, auth_headers, body):
    resp = client.patch(f"/api/applications/{application['id']}", json=body, headers=auth_headers(poster))
    assert resp.status_code == 400


def test_unknown_application(client, poster, auth_headers):
    resp = client.patch("/api/applications/missing", json={"status": "reviewed"}, headers=auth_headers(poster))
    assert resp.status_code == 404
