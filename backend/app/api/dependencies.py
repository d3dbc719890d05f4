"""
API Dependencies
Reusable FastAPI dependencies for endpoint protection and collaborators.
"""

from typing import Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from app.core.config import Settings
from app.core.roles import Role
from app.core.security import PasswordHasher, TokenClaims, TokenCodec
from app.services import auth_service
from app.services.authorization import authorize
from app.services.email import Mailer
from app.services.resume_store import LocalResumeStore

# Missing credentials surface as MissingToken in the app error shape
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_resume_store(request: Request) -> LocalResumeStore:
    return request.app.state.resume_store


def get_current_user(
    codec: TokenCodec = Depends(get_token_codec),
    token: Optional[str] = Depends(oauth2_scheme),
) -> TokenClaims:
    """
    Dependency that enforces authentication.
    Resolves the bearer token to the caller's claims or raises Unauthorized.
    """
    return auth_service.authenticate(codec, token)


def require_roles(allowed_roles: Iterable[Role]):
    """Build a dependency admitting only callers whose role is in ``allowed_roles``."""
    allowed = frozenset(allowed_roles)

    def dependency(user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
        return authorize(user, allowed)

    return dependency
