"""
Authentication API endpoints.

Handles login, session introspection, the mandatory password change,
and public referral code checks.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import (
    get_current_user,
    get_password_hasher,
    get_token_codec,
)
from app.core.security import PasswordHasher, TokenClaims, TokenCodec
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import CamelModel, SessionResponse, UserResponse
from app.services import auth_service, onboarding, referral

router = APIRouter()


# ============== Pydantic Schemas ==============


class LoginRequest(CamelModel):
    email: str
    password: str


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str


class MeResponse(CamelModel):
    user: UserResponse
    redirect_to: str


class ReferralCodeCheck(CamelModel):
    code: str


class ReferralCodeStatus(CamelModel):
    valid: bool
    email: Optional[str] = None
    expires_at: Optional[datetime] = None


# ============== Helper Functions ==============


def redirect_for(user: User) -> str:
    return onboarding.landing_path(user.role, user.first_login, user.onboarding_status)


def session_response(token: str, user: User, message: Optional[str] = None) -> SessionResponse:
    return SessionResponse(
        message=message,
        token=token,
        user=UserResponse.model_validate(user),
        redirect_to=redirect_for(user),
    )


# ============== API Endpoints ==============


@router.post("/login", response_model=SessionResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: TokenCodec = Depends(get_token_codec),
):
    """
    Exchange email and password for an access token.

    Unknown email and wrong password produce the same 401.
    """
    token, user = auth_service.login(db, hasher, codec, payload.email, payload.password)
    return session_response(token, user, "Login successful")


@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current persisted profile and where the client should route it."""
    user = auth_service.load_current_user(db, current_user)
    return MeResponse(user=UserResponse.model_validate(user), redirect_to=redirect_for(user))


@router.post("/change-password", response_model=SessionResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: TokenCodec = Depends(get_token_codec),
):
    token, user = auth_service.change_password(
        db, hasher, codec, current_user, payload.current_password, payload.new_password
    )
    return session_response(token, user, "Password changed successfully")


@router.post("/referral-code/verify", response_model=ReferralCodeStatus)
def verify_referral_code(payload: ReferralCodeCheck, db: Session = Depends(get_db)):
    user = referral.find_by_code(db, payload.code)
    if user is None or not onboarding.referral_code_is_valid(user):
        return ReferralCodeStatus(valid=False)
    return ReferralCodeStatus(
        valid=True,
        email=user.email,
        expires_at=user.referral_code_expires_at,
    )
