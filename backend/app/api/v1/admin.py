"""
Admin API endpoints.

Account lifecycle for administrators: direct creation, listing,
deletion, role changes, and referral code issuance.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import (
    get_app_settings,
    get_mailer,
    get_password_hasher,
    require_roles,
)
from app.core.config import Settings
from app.core.roles import Role
from app.core.security import PasswordHasher, TokenClaims
from app.db.session import get_db
from app.schemas.referral import GenerateReferralCodeRequest, ReferralCodeResponse
from app.schemas.user import CamelModel, MessageResponse, UserResponse
from app.services import authorization, referral, user_lifecycle
from app.services.email import Mailer

router = APIRouter()

require_admin = require_roles(authorization.ADMINS)


# ============== Pydantic Schemas ==============


class CreateUserRequest(CamelModel):
    email: str
    role: Role
    is_super_admin: bool = False


class CreateUserResponse(CamelModel):
    message: str
    user: UserResponse


class UserListResponse(CamelModel):
    total: int
    users: list[UserResponse]


class RoleChangeRequest(CamelModel):
    role: Role
    is_super_admin: bool = False


# ============== API Endpoints ==============


@router.post("/create-user", response_model=CreateUserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: CreateUserRequest,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create an account with a temporary password and email it to the user.

    Regular admins may create posters, seekers and referrers; only a
    super-admin may create admins or super-admins.
    """
    user = user_lifecycle.create_user(
        db, hasher, mailer, settings, admin, payload.email, payload.role, payload.is_super_admin
    )
    return CreateUserResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user),
    )


@router.get("/users", response_model=UserListResponse)
def list_users(
    all_users: bool = Query(False, alias="all"),
    search: Optional[str] = Query(None),
    created_by: Optional[str] = Query(None, alias="createdBy"),
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = user_lifecycle.list_users(db, admin, all_users, search, created_by)
    return UserListResponse(
        total=len(users),
        users=[UserResponse.model_validate(u) for u in users],
    )


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_lifecycle.delete_user(db, admin, user_id)
    return MessageResponse(message="User deleted successfully.")


@router.patch("/users/{user_id}/role", response_model=UserResponse)
def change_user_role(
    user_id: str,
    payload: RoleChangeRequest,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_lifecycle.change_role(db, admin, user_id, payload.role, payload.is_super_admin)
    return UserResponse.model_validate(user)


@router.post(
    "/generate-referral-code",
    response_model=ReferralCodeResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_referral_code(
    payload: GenerateReferralCodeRequest,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
):
    result = referral.issue_referral_code(
        db, hasher, mailer, settings, admin, payload.candidate_email
    )
    return ReferralCodeResponse.from_result(result)
