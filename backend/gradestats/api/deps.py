"""
Shared dependencies: settings and token service from app.state, get_current_user from the raw `authorization` header.
The guard only verifies the token; it does not look the user up and does not check role.
"""
import logging
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from gradestats.config import Settings
from gradestats.services.auth import InvalidToken, TokenPayload, TokenService

# Raw token, no "Bearer" scheme
authorization_header = APIKeyHeader(name="authorization", auto_error=False)
logger = logging.getLogger(__name__)


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_current_user(
    request: Request,
    token: str | None = Depends(authorization_header),
    tokens: TokenService = Depends(get_token_service),
) -> TokenPayload:
    """Require a valid token; attach {id, role} to request.state.user or 401."""
    if not (token or "").strip():
        logger.debug("Auth failed: no authorization header in request")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied")
    try:
        payload = tokens.verify(token.strip())
    except InvalidToken as e:
        logger.debug("Auth failed: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    request.state.user = payload
    return payload


def can_manage_user(caller: TokenPayload, target_user_id: int | None, settings: Settings) -> bool:
    """
    Capability check for /users routes. Open (any valid token) unless RESTRICT_USER_ADMIN is set;
    then admins may act on anyone and other users only on themselves (target None = collection).
    """
    if not settings.restrict_user_admin:
        return True
    if caller.role == "admin":
        return True
    return target_user_id is not None and target_user_id == caller.id


def internal_error(settings: Settings, message: str, exc: Exception) -> HTTPException:
    """500 with the operation message; error text appended only when EXPOSE_ERRORS is on."""
    detail = f"{message}: {type(exc).__name__}: {exc}" if settings.expose_errors else message
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
