"""
Authentication and authorization dependencies
"""

from datetime import timedelta
from typing import Optional
import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from ..accounts import AccountManager
from ..config import LedgerConfig, get_config
from ..exceptions import AuthenticationError
from ..gate import AuthorizationGate
from ..logging_config import get_logger, log_action
from ..storage import AccountStore, InMemoryAccountStore
from ..tokens import AdminAuthenticator, TokenClaims, TokenService
from ..transactions import TransactionIdIssuer


logger = get_logger(__name__)


class LedgerSystem:
    """Ledger service with all components initialized"""

    def __init__(self, config: Optional[LedgerConfig] = None,
                 store: Optional[AccountStore] = None):
        self.config = config or get_config()

        secret = self.config.jwt_secret
        if not secret:
            secret = secrets.token_urlsafe(32)
            log_action(
                logger, "warning",
                "No JWT secret configured; using a random per-process secret",
                action="startup", reason="no_jwt_secret"
            )
        if not self.config.admin_password:
            log_action(
                logger, "warning",
                "No admin password configured; all logins will be refused",
                action="startup", reason="no_admin_password"
            )

        self.token_service = TokenService(
            secret=secret,
            algorithm=self.config.jwt_algorithm,
            ttl=timedelta(minutes=self.config.jwt_expiry_minutes)
        )
        self.authenticator = AdminAuthenticator(
            username=self.config.admin_username,
            password=self.config.admin_password
        )
        self.gate = AuthorizationGate(self.token_service)

        self.store = store or InMemoryAccountStore()
        self.account_manager = AccountManager(self.store, TransactionIdIssuer())


def get_ledger_system(request: Request) -> LedgerSystem:
    """Dependency returning the ledger system bound to the application"""
    system = getattr(request.app.state, "ledger", None)
    if system is None:
        raise HTTPException(status_code=503, detail="Ledger system not initialized")
    return system


def require_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    system: LedgerSystem = Depends(get_ledger_system)
) -> TokenClaims:
    """Dependency that runs the authorization gate and returns the caller's claims"""
    try:
        claims = system.gate.authorize(authorization)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    request.state.principal = claims
    return claims
