"""
Account lifecycle state machine.

An account is in exactly one of three states, derived from the persisted
``first_login`` and ``onboarding_status`` flags:

    PASSWORD_CHANGE_REQUIRED -> (ONBOARDING_REQUIRED, seekers only) -> READY

Two edges lead out of the temporary-password state: the explicit password
change, and onboarding completion, which is accepted as proof the
temporary password was used. Both are implemented here and nowhere else.
"""

import enum
import logging
from datetime import datetime, timedelta
from typing import Optional

from app.core import errors
from app.core.roles import OnboardingStatus, ReferralStatus, Role
from app.db.base import utcnow
from app.models.user import User

logger = logging.getLogger("onboarding")


class AccountState(str, enum.Enum):
    PASSWORD_CHANGE_REQUIRED = "password_change_required"
    ONBOARDING_REQUIRED = "onboarding_required"
    READY = "ready"


ROLE_HOME = {
    Role.ADMIN: "/admin/dashboard",
    Role.JOB_POSTER: "/poster/dashboard",
    Role.JOB_REFERRER: "/referrer/dashboard",
    Role.JOB_SEEKER: "/seeker/dashboard",
}
CHANGE_PASSWORD_PATH = "/change-password"
ONBOARDING_PATH = "/seeker/onboarding"


def account_state(role: Role, first_login: bool, onboarding_status: OnboardingStatus) -> AccountState:
    # firstLogin is checked before onboarding
    if first_login:
        return AccountState.PASSWORD_CHANGE_REQUIRED
    if role == Role.JOB_SEEKER and onboarding_status != OnboardingStatus.COMPLETED:
        return AccountState.ONBOARDING_REQUIRED
    return AccountState.READY


def landing_path(role: Role, first_login: bool, onboarding_status: OnboardingStatus) -> str:
    """Where a client must send this user before any role-specific page."""
    state = account_state(role, first_login, onboarding_status)
    if state == AccountState.PASSWORD_CHANGE_REQUIRED:
        return CHANGE_PASSWORD_PATH
    if state == AccountState.ONBOARDING_REQUIRED:
        return ONBOARDING_PATH
    return ROLE_HOME[role]


def initial_onboarding_status(role: Role) -> OnboardingStatus:
    return OnboardingStatus.PENDING if role == Role.JOB_SEEKER else OnboardingStatus.COMPLETED


def arm_new_account(user: User, role: Role) -> None:
    """Every freshly issued account starts on a temporary password."""
    user.role = role
    user.first_login = True
    user.onboarding_status = initial_onboarding_status(role)


def apply_role_change(user: User, role: Role) -> None:
    user.role = role
    if role != Role.JOB_SEEKER:
        user.onboarding_status = OnboardingStatus.COMPLETED
    elif not _has_completed_profile(user):
        user.onboarding_status = OnboardingStatus.PENDING


def assign_referral_code(user: User, code: str, valid_for: timedelta, now: Optional[datetime] = None) -> None:
    issued_at = now or utcnow()
    user.referral_code = code
    user.referral_code_expires_at = issued_at + valid_for


def rearm_for_referral(user: User) -> None:
    """
    Reset an existing account onto the referral path.

    Forces the seeker role and restarts password change and onboarding,
    whatever state the account was in before.
    """
    if user.role != Role.JOB_SEEKER:
        logger.info("Converting %s from %s to job_seeker for referral", user.email, user.role.value)
    user.role = Role.JOB_SEEKER
    user.is_super_admin = False
    user.first_login = True
    user.onboarding_status = OnboardingStatus.PENDING
    if user.referral_status is not None:
        user.referral_status = ReferralStatus.PENDING_ONBOARDING


def mark_referred(user: User, referrer_id: str, now: Optional[datetime] = None) -> None:
    user.referred_by = referrer_id
    user.referred_on = now or utcnow()
    user.referral_status = ReferralStatus.PENDING_ONBOARDING


def referral_code_is_valid(user: User, now: Optional[datetime] = None) -> bool:
    """A code stays usable up to and including its expiry instant."""
    if not user.referral_code or user.referral_code_expires_at is None:
        return False
    return (now or utcnow()) <= user.referral_code_expires_at


def complete_password_change(user: User, new_password_hash: str) -> None:
    user.password_hash = new_password_hash
    user.first_login = False


def ensure_can_onboard(user: User, now: Optional[datetime] = None) -> None:
    if user.role != Role.JOB_SEEKER:
        raise errors.Forbidden("Only job seekers can complete onboarding")
    if user.referral_code and not referral_code_is_valid(user, now):
        raise errors.ReferralCodeExpired()


def complete_onboarding(
    user: User,
    full_name: str,
    phone: str,
    skills: list[str],
    experience: str,
    resume_path: str,
    now: Optional[datetime] = None,
) -> None:
    """Persist the seeker profile and move the account to READY."""
    ensure_can_onboard(user, now)

    user.candidate_details = {
        "fullName": full_name,
        "phone": phone,
        "skills": skills,
        "experience": experience,
    }
    user.resume_path = resume_path
    user.onboarding_status = OnboardingStatus.COMPLETED
    user.first_login = False
    if user.referral_status is not None:
        user.referral_status = ReferralStatus.ONBOARDING_COMPLETE
    logger.info("Onboarding completed for %s", user.email)


def _has_completed_profile(user: User) -> bool:
    details = user.candidate_details or {}
    return bool(details.get("fullName")) and bool(user.resume_path)
