"""
Security utilities for authentication.

Provides password hashing (bcrypt) and the signed access token codec (JWT).
"""

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core import errors
from app.core.roles import OnboardingStatus, Role

logger = logging.getLogger("auth")

ALPHANUMERIC = string.ascii_letters + string.digits


def random_string(length: int, alphabet: str = ALPHANUMERIC) -> str:
    """Return a cryptographically random string drawn from ``alphabet``."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


class PasswordHasher:
    """One-way salted bcrypt hashing with constant-time verification."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: The plain text password to hash

        Returns:
            The hashed password string
        """
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify a plain password against a hashed password.

        A missing or malformed hash verifies as False instead of raising,
        so an account without a usable password simply cannot log in.
        """
        if not plain_password or not hashed_password:
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False


class TokenClaims(BaseModel):
    """Identity, role and lifecycle flags carried by an access token."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str
    email: str
    role: Role
    first_login: bool
    is_super_admin: bool = False
    onboarding_status: OnboardingStatus

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TokenCodec:
    """Signs and verifies access tokens with a server-held secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        if not secret_key:
            raise RuntimeError("SECRET_KEY is not configured; refusing to start")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl

    def issue(
        self,
        claims: TokenClaims,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Create a JWT access token for ``claims``.

        Args:
            claims: The claim set to embed
            ttl: Optional custom lifetime (defaults to the configured 24h)
            now: Issuance instant, for callers that control the clock

        Returns:
            The encoded JWT token string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = claims.to_payload()
        payload["iat"] = int(issued_at.timestamp())
        payload["exp"] = int((issued_at + (ttl or self.ttl)).timestamp())
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        """
        Decode and validate an access token.

        Raises:
            MalformedToken: not a decodable JWT or claims missing
            InvalidSignature: signed with another key or tampered with
            ExpiredToken: ``now`` is at or past the expiry instant
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "require": ["exp"]},
            )
        except jwt.InvalidSignatureError as exc:
            raise errors.InvalidSignature() from exc
        except jwt.PyJWTError as exc:
            raise errors.MalformedToken() from exc

        current = now or datetime.now(timezone.utc)
        try:
            expires_at = int(payload["exp"])
        except (TypeError, ValueError) as exc:
            raise errors.MalformedToken() from exc
        if current.timestamp() >= expires_at:
            raise errors.ExpiredToken()

        try:
            return TokenClaims.model_validate(payload)
        except ValueError as exc:
            raise errors.MalformedToken() from exc
