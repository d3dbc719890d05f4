"""
Referral Schemas
Shared by the admin and referrer issuance endpoints.
"""

from datetime import datetime
from typing import Optional

from app.core.roles import OnboardingStatus
from app.schemas.user import CamelModel


class GenerateReferralCodeRequest(CamelModel):
    candidate_email: str


class ReferralCodeResponse(CamelModel):
    message: str
    code: str
    expires_at: datetime
    is_new_user: bool
    user_id: str

    @classmethod
    def from_result(cls, result) -> "ReferralCodeResponse":
        return cls(
            message=f"Referral code generated for {result.user.email}",
            code=result.code,
            expires_at=result.expires_at,
            is_new_user=result.is_new_user,
            user_id=result.user.id,
        )


class ReferredCandidate(CamelModel):
    id: str
    candidate_name: Optional[str] = None
    candidate_email: str
    referred_on: Optional[datetime] = None
    referral_code: Optional[str] = None
    onboarding_status: OnboardingStatus


class ReferrerDashboard(CamelModel):
    total_referrals: int
    recent_referrals: list[ReferredCandidate]
