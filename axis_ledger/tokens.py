"""
Token Service Module

Issues and verifies signed, time-bound bearer credentials. A credential is an
HS256 JWT carrying the caller's identity (``sub``) and role claim; nothing is
stored server-side, so verification depends only on the payload and the
shared signing secret.
"""

from datetime import datetime, timezone, timedelta
from dataclasses import dataclass
from typing import Callable, Optional
from enum import Enum
import hmac

import jwt

from .exceptions import InvalidCredential


REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


class Role(Enum):
    """Roles a credential may carry"""
    ADMIN = "admin"


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a credential"""
    identity: str
    role: Role
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Stateless credential issuer/verifier

    The secret and algorithm are fixed for the lifetime of the instance.
    The clock sets issuance time and is the "now" that expiry is checked
    against.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
        clock: Optional[Callable[[], datetime]] = None
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or _utcnow

    def issue(self, identity: str, role: Role = Role.ADMIN) -> str:
        """
        Issue a credential for an already-authenticated identity

        Args:
            identity: Caller identity, stored as the ``sub`` claim
            role: Role claim

        Returns:
            Encoded JWT
        """
        issued_at = self._clock()
        payload = {
            "sub": identity,
            "role": role.value,
            "iat": issued_at,
            "exp": issued_at + self.ttl
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a credential and return its claims

        Raises:
            InvalidCredential: bad signature, malformed structure, missing or
                unknown claims, or expiry in the past
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against the service clock
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                }
            )
        except jwt.InvalidTokenError:
            raise InvalidCredential("Token is not valid")

        identity = payload.get("sub")
        if not isinstance(identity, str) or not identity:
            raise InvalidCredential("Token is not valid")

        try:
            role = Role(payload.get("role"))
        except ValueError:
            raise InvalidCredential("Token is not valid")

        try:
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            raise InvalidCredential("Token is not valid")

        if expires_at <= self._clock():
            raise InvalidCredential("Token expired")

        return TokenClaims(
            identity=identity,
            role=role,
            issued_at=issued_at,
            expires_at=expires_at
        )


class AdminAuthenticator:
    """Checks a login against the single configured admin credential"""

    def __init__(self, username: str, password: Optional[str]):
        self.username = username
        self._password = password

    @property
    def enabled(self) -> bool:
        return bool(self._password)

    def authenticate(self, username: Optional[str], password: Optional[str]) -> str:
        """
        Return the authenticated identity or raise InvalidCredential
        """
        if not self.enabled:
            raise InvalidCredential("Invalid credentials")
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidCredential("Invalid credentials")

        # Both comparisons always run
        username_ok = hmac.compare_digest(username.encode(), self.username.encode())
        password_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if not (username_ok and password_ok):
            raise InvalidCredential("Invalid credentials")

        return self.username
