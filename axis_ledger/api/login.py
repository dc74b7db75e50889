"""
Login endpoint
"""

from fastapi import APIRouter, HTTPException, Depends, Request, status

from .auth import LedgerSystem, get_ledger_system
from .schemas import LoginRequest, TokenResponse, json_body_schema, read_json_object
from ..exceptions import InvalidCredential
from ..logging_config import get_logger, log_action
from ..tokens import Role


logger = get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse,
             openapi_extra=json_body_schema(LoginRequest))
async def login(
    request: Request,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Validate admin credentials and return a bearer token with an admin role claim"""
    body = await read_json_object(request)
    username = body.get("username")
    try:
        identity = system.authenticator.authenticate(username, body.get("password"))
    except InvalidCredential as e:
        log_action(
            logger, "warning", "Authentication failed",
            identity=username if isinstance(username, str) else None,
            action="login_failed", reason=str(e)
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    token = system.token_service.issue(identity, Role.ADMIN)

    log_action(
        logger, "info", "User authenticated successfully",
        identity=identity, action="login"
    )
    return {"token": token}
