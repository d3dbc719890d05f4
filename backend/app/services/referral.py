"""
Referral code issuance.

A referral code is a short, time-bounded onboarding credential distinct
from the access token. Issuing one either creates a placeholder job
seeker for a new email or re-arms the existing account on that email.

Codes are drawn until one is not present in the store. The check-then-
insert is not atomic: two concurrent issuers could draw the same code, in
which case the unique index rejects the second commit with Conflict.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core import errors
from app.core.config import Settings
from app.core.roles import Role
from app.core.security import PasswordHasher, TokenClaims, random_string
from app.db.base import utcnow
from app.models.user import User
from app.services import authorization, onboarding
from app.services.email import Mailer, referral_email, send_best_effort
from app.services.user_lifecycle import (
    commit_or_conflict,
    generate_temporary_password,
    get_user_by_email,
    unique_username,
    validate_email,
)

logger = logging.getLogger("referral")


@dataclass
class ReferralResult:
    user: User
    code: str
    expires_at: datetime
    is_new_user: bool


def generate_unique_code(
    db: Session,
    length: int = 8,
    generator: Callable[[int], str] = random_string,
) -> str:
    """Draw codes until one is not held by any user."""
    code = generator(length)
    attempts = 1
    while db.query(User.id).filter(User.referral_code == code).first() is not None:
        code = generator(length)
        attempts += 1
    if attempts > 1:
        logger.info("Referral code collision; unique code found after %d draws", attempts)
    return code


def find_by_code(db: Session, code: str) -> Optional[User]:
    if not code:
        return None
    return db.query(User).filter(User.referral_code == code.strip()).first()


def issue_referral_code(
    db: Session,
    hasher: PasswordHasher,
    mailer: Mailer,
    settings: Settings,
    issuer: TokenClaims,
    candidate_email: str,
    now: Optional[datetime] = None,
    code_generator: Callable[[int], str] = random_string,
) -> ReferralResult:
    authorization.authorize(issuer, authorization.REFERRAL_ISSUERS)
    email = validate_email(candidate_email)
    issued_at = now or utcnow()
    valid_for = timedelta(days=settings.REFERRAL_CODE_VALID_DAYS)
    by_referrer = issuer.role == Role.JOB_REFERRER

    code = generate_unique_code(db, settings.REFERRAL_CODE_LENGTH, code_generator)
    temporary_password = None
    user = get_user_by_email(db, email)

    if user is not None:
        if by_referrer and user.role != Role.JOB_SEEKER:
            raise errors.Conflict(
                f"A user with the email {email} already exists and cannot be assigned as a new job seeker"
            )
        authorization.check_can_manage(issuer, user.id, user.is_super_admin)
        onboarding.rearm_for_referral(user)
        is_new_user = False
    else:
        temporary_password = generate_temporary_password(settings.TEMP_PASSWORD_LENGTH)
        user = User(
            username=unique_username(db, email),
            email=email,
            password_hash=hasher.hash(temporary_password),
            is_super_admin=False,
            created_by=issuer.id,
        )
        onboarding.arm_new_account(user, Role.JOB_SEEKER)
        db.add(user)
        is_new_user = True

    onboarding.assign_referral_code(user, code, valid_for, issued_at)
    if by_referrer:
        onboarding.mark_referred(user, issuer.id, issued_at)
        details = dict(user.candidate_details or {})
        details["fullName"] = details.get("fullName") or (user.username if is_new_user else email.split("@")[0])
        user.candidate_details = details

    commit_or_conflict(db, "Could not assign a unique referral code, please retry")
    db.refresh(user)
    logger.info(
        "%s %s issued referral code for %s (new user: %s)",
        issuer.role.value,
        issuer.id,
        email,
        is_new_user,
    )

    send_best_effort(
        mailer,
        referral_email(
            to=email,
            code=code,
            expires_at=user.referral_code_expires_at,
            valid_days=settings.REFERRAL_CODE_VALID_DAYS,
            login_url=f"{settings.FRONTEND_URL.rstrip('/')}/login",
            team_name=settings.email_sender_name,
            issued_by_referrer=by_referrer,
            temporary_password=temporary_password,
        ),
    )
    return ReferralResult(
        user=user,
        code=code,
        expires_at=user.referral_code_expires_at,
        is_new_user=is_new_user,
    )


def referral_dashboard(db: Session, referrer: TokenClaims, limit: int = 10) -> dict:
    authorization.authorize(referrer, authorization.REFERRERS)
    query = db.query(User).filter(
        User.referred_by == referrer.id, User.role == Role.JOB_SEEKER
    )
    total = query.count()
    recent = query.order_by(User.created_at.desc()).limit(limit).all()
    return {"total": total, "recent": recent}
