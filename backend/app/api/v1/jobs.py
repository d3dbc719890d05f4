"""
Jobs API endpoints.

Posting jobs, applying to them, and moving applications through review.
Posters may only act on applications to their own jobs.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import require_roles
from app.core.roles import ApplicationStatus
from app.core.security import TokenClaims
from app.db.session import get_db
from app.schemas.user import CamelModel
from app.services import authorization, jobs

router = APIRouter()


# ============== Pydantic Schemas ==============


class JobCreate(CamelModel):
    title: str
    description: Optional[str] = None


class JobResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    posted_by: str
    created_at: datetime


class ApplicationStatusUpdate(CamelModel):
    status: Optional[str] = None


class ApplicationResponse(CamelModel):
    id: str
    job_id: str
    applicant_id: str
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime


# ============== API Endpoints ==============


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    poster: TokenClaims = Depends(require_roles(authorization.JOB_MANAGERS)),
    db: Session = Depends(get_db),
):
    return jobs.create_job(db, poster, payload.title, payload.description)


@router.post(
    "/jobs/{job_id}/apply",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
def apply_to_job(
    job_id: str,
    seeker: TokenClaims = Depends(require_roles(authorization.JOB_SEEKERS)),
    db: Session = Depends(get_db),
):
    """
    Apply to a job.

    Only accounts that have changed their temporary password and finished
    onboarding may apply; the check reads persisted state, not the token.
    """
    return jobs.apply_to_job(db, seeker, job_id)


@router.patch("/applications/{application_id}", response_model=ApplicationResponse)
def update_application(
    application_id: str,
    payload: ApplicationStatusUpdate,
    actor: TokenClaims = Depends(require_roles(authorization.JOB_MANAGERS)),
    db: Session = Depends(get_db),
):
    return jobs.update_application_status(db, actor, application_id, payload.status)
