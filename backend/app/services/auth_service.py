"""
Authentication service.

Login, token minting, and bearer token verification. Every protected
route reaches the caller's identity through ``authenticate``.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core import errors
from app.core.password_policy import validate_password
from app.core.security import PasswordHasher, TokenClaims, TokenCodec
from app.db.base import utcnow
from app.models.user import User
from app.services import onboarding
from app.services.user_lifecycle import get_user, get_user_by_email

logger = logging.getLogger("auth")


def claims_for(user: User) -> TokenClaims:
    return TokenClaims(
        id=user.id,
        email=user.email,
        role=user.role,
        first_login=user.first_login,
        is_super_admin=user.is_super_admin,
        onboarding_status=user.onboarding_status,
    )


def mint_token(codec: TokenCodec, user: User) -> str:
    """Issue a token reflecting the user's current persisted state."""
    return codec.issue(claims_for(user))


def authenticate_user(db: Session, hasher: PasswordHasher, email: str, password: str) -> User:
    """Return the user for valid credentials; unknown email and wrong password look identical."""
    user = get_user_by_email(db, email)
    if user is None or not hasher.verify((password or "").strip(), user.password_hash):
        logger.warning("Login failed for %s", (email or "").strip().lower())
        raise errors.InvalidCredentials()
    return user


def login(
    db: Session, hasher: PasswordHasher, codec: TokenCodec, email: str, password: str
) -> tuple[str, User]:
    user = authenticate_user(db, hasher, email, password)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    token = mint_token(codec, user)
    logger.info(
        "Login successful for %s (firstLogin=%s, onboardingStatus=%s)",
        user.email,
        user.first_login,
        user.onboarding_status.value,
    )
    return token, user


def authenticate(codec: TokenCodec, token: Optional[str]) -> TokenClaims:
    """Resolve a bearer token to the caller's claims."""
    if not token:
        raise errors.MissingToken()
    try:
        return codec.verify(token)
    except errors.Unauthorized as exc:
        logger.info("Rejected token: %s", type(exc).__name__)
        raise


def load_current_user(db: Session, claims: TokenClaims) -> User:
    user = get_user(db, claims.id)
    if user is None:
        raise errors.NotFound("User not found")
    return user


def change_password(
    db: Session,
    hasher: PasswordHasher,
    codec: TokenCodec,
    claims: TokenClaims,
    current_password: str,
    new_password: str,
) -> tuple[str, User]:
    """Replace the password and leave the temporary-password state."""
    current_password = (current_password or "").strip()
    new_password = (new_password or "").strip()
    problems = validate_password(new_password, current_password)
    if problems:
        raise errors.ValidationError("; ".join(problems))

    user = load_current_user(db, claims)
    if not hasher.verify(current_password, user.password_hash):
        raise errors.InvalidCredentials("Current password is incorrect")

    onboarding.complete_password_change(user, hasher.hash(new_password))
    db.commit()
    db.refresh(user)
    logger.info("Password changed for %s", user.email)
    return mint_token(codec, user), user
