"""
Referrer API endpoints.

Job referrers invite candidates by email and follow their progress.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import (
    get_app_settings,
    get_mailer,
    get_password_hasher,
    require_roles,
)
from app.core.config import Settings
from app.core.security import PasswordHasher, TokenClaims
from app.db.session import get_db
from app.schemas.referral import (
    GenerateReferralCodeRequest,
    ReferralCodeResponse,
    ReferredCandidate,
    ReferrerDashboard,
)
from app.services import authorization, referral
from app.services.email import Mailer

router = APIRouter()

require_referrer = require_roles(authorization.REFERRERS)


@router.post(
    "/generate-referral-code",
    response_model=ReferralCodeResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_referral_code(
    payload: GenerateReferralCodeRequest,
    referrer: TokenClaims = Depends(require_referrer),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
):
    """
    Invite a candidate.

    Unknown emails get a new job seeker account; an existing job seeker
    is re-armed with a fresh code. Any other existing account is a 409.
    """
    result = referral.issue_referral_code(
        db, hasher, mailer, settings, referrer, payload.candidate_email
    )
    return ReferralCodeResponse.from_result(result)


@router.get("/dashboard-data", response_model=ReferrerDashboard)
def dashboard_data(
    referrer: TokenClaims = Depends(require_referrer),
    db: Session = Depends(get_db),
):
    summary = referral.referral_dashboard(db, referrer)
    recent = [
        ReferredCandidate(
            id=candidate.id,
            candidate_name=(candidate.candidate_details or {}).get("fullName") or candidate.username or candidate.email,
            candidate_email=candidate.email,
            referred_on=candidate.referred_on or candidate.created_at,
            referral_code=candidate.referral_code,
            onboarding_status=candidate.onboarding_status,
        )
        for candidate in summary["recent"]
    ]
    return ReferrerDashboard(total_referrals=summary["total"], recent_referrals=recent)
