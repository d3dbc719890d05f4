"""
Job seeker API endpoints.

Handles the one-time onboarding submission: profile fields plus a PDF
resume. A successful submission re-mints the session token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.api.dependencies import (
    get_resume_store,
    get_token_codec,
    require_roles,
)
from app.api.v1.auth import session_response
from app.core import errors
from app.core.security import TokenClaims, TokenCodec
from app.db.session import get_db
from app.schemas.user import SessionResponse
from app.services import auth_service, authorization, onboarding
from app.services.resume_store import LocalResumeStore

router = APIRouter()

ACCEPTED_RESUME_TYPES = {"application/pdf"}

require_seeker = require_roles(authorization.JOB_SEEKERS)


def parse_skills(raw: str) -> list[str]:
    return [skill.strip() for skill in raw.split(",") if skill.strip()]


@router.post("/onboarding", response_model=SessionResponse)
async def complete_onboarding(
    full_name: Optional[str] = Form(None, alias="fullName"),
    phone: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    seeker: TokenClaims = Depends(require_seeker),
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    store: LocalResumeStore = Depends(get_resume_store),
):
    """
    Complete the job seeker profile.

    All checks run before the resume is written to the store.
    """
    fields = [full_name, phone, skills, experience]
    if resume is None or any(not (value or "").strip() for value in fields):
        raise errors.ValidationError(
            "All fields are required: fullName, phone, skills, experience, resume"
        )
    if resume.content_type not in ACCEPTED_RESUME_TYPES:
        raise errors.ValidationError("Resume must be a PDF file")

    content = await resume.read()
    if not content:
        raise errors.ValidationError("Resume file is empty")

    skill_list = parse_skills(skills)
    if not skill_list:
        raise errors.ValidationError("At least one skill is required")

    user = auth_service.load_current_user(db, seeker)
    onboarding.ensure_can_onboard(user)

    resume_path = store.store(user.id, resume.filename, content)
    try:
        onboarding.complete_onboarding(
            user,
            full_name=full_name.strip(),
            phone=phone.strip(),
            skills=skill_list,
            experience=experience.strip(),
            resume_path=resume_path,
        )
        db.commit()
    except Exception:
        # The profile was not recorded, so the file has no owner
        db.rollback()
        store.delete(resume_path)
        raise
    db.refresh(user)

    token = auth_service.mint_token(codec, user)
    return session_response(token, user, "Onboarding completed successfully")
