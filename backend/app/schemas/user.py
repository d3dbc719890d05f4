"""
User Schemas
Client-facing projections. The password hash never appears here.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.roles import OnboardingStatus, ReferralStatus, Role


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    role: Role
    is_super_admin: bool
    first_login: bool
    onboarding_status: OnboardingStatus
    created_by: Optional[str] = None
    referral_code: Optional[str] = None
    referral_code_expires_at: Optional[datetime] = None
    referred_by: Optional[str] = None
    referral_status: Optional[ReferralStatus] = None
    referred_on: Optional[datetime] = None
    candidate_details: Optional[dict[str, Any]] = None
    resume_path: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SessionResponse(CamelModel):
    """A user projection plus a token minted from the same state."""

    message: Optional[str] = None
    token: str
    user: UserResponse
    redirect_to: str


class MessageResponse(CamelModel):
    message: str
