"""
Authorization Gate Module

Single enforcement point in front of every ledger operation: extracts the
bearer credential from a raw Authorization header and verifies it.
"""

from typing import Optional

from .exceptions import MissingCredential, InvalidCredential
from .tokens import TokenService, TokenClaims
from .logging_config import get_logger, log_action


logger = get_logger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Return the token from a ``Bearer <token>`` header, or None"""
    if not header:
        return None
    parts = header.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        return None
    token = parts[1].strip()
    return token or None


class AuthorizationGate:
    """Admits or rejects a call based on its Authorization header"""

    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    def authorize(self, header: Optional[str]) -> TokenClaims:
        """
        Verify the caller's credential

        Args:
            header: Raw Authorization header value, None if absent

        Returns:
            Claims of the verified credential

        Raises:
            MissingCredential: no bearer credential present
            InvalidCredential: credential failed verification
        """
        token = extract_bearer_token(header)
        if token is None:
            log_action(
                logger, "warning", "Rejected call without bearer credential",
                action="authorize_rejected", reason="missing"
            )
            raise MissingCredential("No token provided")

        try:
            claims = self.token_service.verify(token)
        except InvalidCredential as e:
            log_action(
                logger, "warning", "Rejected call with invalid credential",
                action="authorize_rejected", reason=str(e)
            )
            raise

        return claims
