"""Jobs and applications: the resources guarded by ownership checks."""

import logging

from sqlalchemy.orm import Session

from app.core import errors
from app.core.roles import ApplicationStatus
from app.core.security import TokenClaims
from app.models.job import Application, Job
from app.models.user import User
from app.services import authorization, onboarding
from app.services.user_lifecycle import commit_or_conflict

logger = logging.getLogger("applications")


def create_job(db: Session, poster: TokenClaims, title: str, description: str = "") -> Job:
    authorization.authorize(poster, authorization.JOB_MANAGERS)
    title = (title or "").strip()
    if not title:
        raise errors.ValidationError("Job title is required")
    job = Job(title=title, description=description or None, posted_by=poster.id)
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("Job %s posted by %s", job.id, poster.id)
    return job


def apply_to_job(db: Session, seeker: TokenClaims, job_id: str) -> Application:
    authorization.authorize(seeker, authorization.JOB_SEEKERS)
    applicant = db.get(User, seeker.id)
    if applicant is None:
        raise errors.NotFound("User not found")
    state = onboarding.account_state(applicant.role, applicant.first_login, applicant.onboarding_status)
    if state != onboarding.AccountState.READY:
        raise errors.Forbidden(state.value)

    job = db.get(Job, job_id)
    if job is None:
        raise errors.NotFound("Job not found")

    application = Application(job_id=job.id, applicant_id=seeker.id)
    db.add(application)
    commit_or_conflict(db, "You have already applied to this job")
    db.refresh(application)
    return application


def update_application_status(
    db: Session, actor: TokenClaims, application_id: str, new_status: str
) -> Application:
    authorization.authorize(actor, authorization.JOB_MANAGERS)
    try:
        status = ApplicationStatus(new_status)
    except ValueError:
        valid = ", ".join(s.value for s in ApplicationStatus)
        raise errors.ValidationError(f"Invalid or missing status. Must be one of: {valid}")

    application = db.get(Application, application_id)
    if application is None:
        raise errors.NotFound("Application not found")
    authorization.check_ownership(application.job.posted_by if application.job else None, actor)

    application.status = status
    db.commit()
    db.refresh(application)
    logger.info("Application %s set to %s by %s", application.id, status.value, actor.id)
    return application
