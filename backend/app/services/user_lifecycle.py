"""
Admin-facing account lifecycle: create, list, delete, role change.

Uniqueness of email/username is enforced by the store; a losing
concurrent insert surfaces as an IntegrityError and becomes Conflict.
"""

import logging
import re
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import errors
from app.core.config import Settings
from app.core.roles import OnboardingStatus, Role
from app.core.security import PasswordHasher, TokenClaims, random_string
from app.models.user import User
from app.services import authorization, onboarding
from app.services.email import Mailer, send_best_effort, welcome_email

logger = logging.getLogger("user_lifecycle")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


# ============== Lookups ==============


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def validate_email(email: str) -> str:
    """Return the normalized address or raise ValidationError."""
    normalized = normalize_email(email)
    if not EMAIL_PATTERN.match(normalized):
        raise errors.ValidationError("Invalid email format")
    return normalized


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, str(user_id))


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def unique_username(db: Session, email: str) -> str:
    """Email local part stripped to alphanumerics, suffixed until free."""
    base = _NON_ALNUM.sub("", email.split("@")[0]) or "user"
    candidate = base
    counter = 0
    while db.query(User.id).filter(User.username == candidate).first() is not None:
        counter += 1
        candidate = f"{base}{counter}"
    return candidate


def generate_temporary_password(length: int) -> str:
    return random_string(length)


def commit_or_conflict(db: Session, detail: str) -> None:
    """Commit, translating unique-index violations into Conflict."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Unique constraint rejected write: %s", exc.orig)
        raise errors.Conflict(detail) from exc


# ============== Operations ==============


def create_user(
    db: Session,
    hasher: PasswordHasher,
    mailer: Mailer,
    settings: Settings,
    actor: TokenClaims,
    email: str,
    role: Role,
    is_super_admin: bool = False,
) -> User:
    """
    Admin direct-create.

    Issues a temporary password, emails it, and leaves the account in the
    password-change state. Seekers additionally start with pending onboarding.
    """
    email = validate_email(email)
    authorization.check_can_assign(actor, role, is_super_admin)
    if is_super_admin and role != Role.ADMIN:
        raise errors.ValidationError("Only admin accounts can be super admins")
    if get_user_by_email(db, email) is not None:
        raise errors.Conflict("Email already in use")

    temporary_password = generate_temporary_password(settings.TEMP_PASSWORD_LENGTH)
    user = User(
        username=unique_username(db, email),
        email=email,
        password_hash=hasher.hash(temporary_password),
        is_super_admin=is_super_admin,
        created_by=actor.id,
    )
    onboarding.arm_new_account(user, role)
    db.add(user)
    commit_or_conflict(db, "Email or username already in use")
    db.refresh(user)
    logger.info("Admin %s created %s user %s", actor.id, role.value, user.email)

    send_best_effort(
        mailer,
        welcome_email(
            to=user.email,
            username=user.username,
            temporary_password=temporary_password,
            login_url=f"{settings.FRONTEND_URL.rstrip('/')}/login",
        ),
    )
    return user


def delete_user(db: Session, actor: TokenClaims, target_id: str) -> None:
    if not target_id:
        raise errors.ValidationError("User ID is required")
    if str(target_id) == str(actor.id):
        raise errors.Forbidden("You cannot delete your own account")

    target = get_user(db, target_id)
    if target is None:
        raise errors.NotFound("User not found")
    authorization.check_can_manage(actor, target.id, target.is_super_admin)

    db.delete(target)
    db.commit()
    logger.info("Admin %s deleted user %s (%s)", actor.id, target.id, target.email)


def list_users(
    db: Session,
    actor: TokenClaims,
    all_users: bool = False,
    search: Optional[str] = None,
    created_by: Optional[str] = None,
) -> list[User]:
    """
    Regular admins only ever see the accounts they created. Super-admins
    see everything by default and may narrow by creator.
    """
    query = db.query(User)
    if actor.is_super_admin:
        if created_by and not all_users:
            query = query.filter(User.created_by == created_by)
    else:
        if created_by and str(created_by) != str(actor.id):
            raise errors.Forbidden("You can only list users you created")
        query = query.filter(User.created_by == actor.id)

    term = (search or "").strip()
    if term:
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        query = query.filter(
            or_(
                User.email.ilike(pattern, escape="\\"),
                User.username.ilike(pattern, escape="\\"),
            )
        )
    return query.order_by(User.created_at.desc()).all()


def change_role(
    db: Session,
    actor: TokenClaims,
    target_id: str,
    role: Role,
    is_super_admin: bool = False,
) -> User:
    if str(target_id) == str(actor.id):
        raise errors.Forbidden("You cannot change your own role")
    authorization.check_can_assign(actor, role, is_super_admin)
    if is_super_admin and role != Role.ADMIN:
        raise errors.ValidationError("Only admin accounts can be super admins")

    target = get_user(db, target_id)
    if target is None:
        raise errors.NotFound("User not found")
    authorization.check_can_manage(actor, target.id, target.is_super_admin)

    previous = target.role
    onboarding.apply_role_change(target, role)
    target.is_super_admin = is_super_admin
    db.commit()
    db.refresh(target)
    logger.info(
        "Admin %s changed role of %s from %s to %s", actor.id, target.email, previous.value, role.value
    )
    return target


def seed_super_admin(db: Session, hasher: PasswordHasher, email: str, password: str) -> Optional[User]:
    """Create the first super-admin; no-op when any admin already exists."""
    if db.query(User.id).filter(User.role == Role.ADMIN).first() is not None:
        return None
    email = validate_email(email)
    user = User(
        username=unique_username(db, email),
        email=email,
        password_hash=hasher.hash(password),
        role=Role.ADMIN,
        is_super_admin=True,
        first_login=True,
        onboarding_status=OnboardingStatus.COMPLETED,
    )
    db.add(user)
    commit_or_conflict(db, "Email already in use")
    db.refresh(user)
    logger.info("Seeded super admin %s", user.email)
    return user
