"""
Authorization gate.

Role membership, ownership, and admin hierarchy checks live here so call
sites never compare role strings inline.
"""

from typing import Iterable, Optional

from app.core import errors
from app.core.roles import Role
from app.core.security import TokenClaims

ADMINS = frozenset({Role.ADMIN})
REFERRAL_ISSUERS = frozenset({Role.ADMIN, Role.JOB_REFERRER})
JOB_MANAGERS = frozenset({Role.ADMIN, Role.JOB_POSTER})
JOB_SEEKERS = frozenset({Role.JOB_SEEKER})
REFERRERS = frozenset({Role.JOB_REFERRER})

# Roles a regular (non-super) admin may hand out
REGULAR_ADMIN_ASSIGNABLE = frozenset({Role.JOB_POSTER, Role.JOB_SEEKER, Role.JOB_REFERRER})


def authorize(user: TokenClaims, allowed_roles: Iterable[Role]) -> TokenClaims:
    """Raise Forbidden unless ``user.role`` is one of ``allowed_roles``."""
    if user.role not in frozenset(allowed_roles):
        raise errors.Forbidden()
    return user


def check_ownership(resource_owner_id: Optional[str], user: TokenClaims) -> None:
    """Admins pass unconditionally; anyone else must own the resource."""
    if user.role == Role.ADMIN:
        return
    if resource_owner_id is None or str(resource_owner_id) != str(user.id):
        raise errors.Forbidden("You can only modify resources you own")


def check_can_assign(actor: TokenClaims, role: Role, is_super_admin: bool) -> None:
    """Only super-admins may grant the admin role or the super-admin flag."""
    if actor.is_super_admin:
        return
    if is_super_admin or role not in REGULAR_ADMIN_ASSIGNABLE:
        raise errors.Forbidden("Insufficient privileges for this role")


def check_can_manage(actor: TokenClaims, target_id: str, target_is_super_admin: bool) -> None:
    """Hierarchy rule for destructive admin actions on another account."""
    if str(target_id) == str(actor.id):
        raise errors.Forbidden("You cannot perform this action on your own account")
    if target_is_super_admin and not actor.is_super_admin:
        raise errors.Forbidden("Only super administrators can manage super administrators")
