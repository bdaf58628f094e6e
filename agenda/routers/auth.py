"""Authentication router - admin login with a signed session cookie."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from agenda.core.config import settings
from agenda.core.deps import COOKIE_NAME, get_current_principal, require_csrf_header
from agenda.core.rate_limit import limiter
from agenda.core.security import create_session_token, verify_admin_credentials
from agenda.core.structured_logging import build_log_context
from agenda.schemas.auth import LoginRequest, MeResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=MeResponse, dependencies=[Depends(require_csrf_header)])
@limiter.limit(f"{settings.RATE_LIMIT_AUTH}/minute")
def login(data: LoginRequest, request: Request, response: Response):
    """Exchange admin credentials for a session cookie."""
    if not verify_admin_credentials(data.username, data.password):
        logger.info("Failed login attempt", extra=build_log_context(route="/auth/login", method="POST"))
        raise HTTPException(status_code=401, detail="Invalid credentials")

    response.set_cookie(
        key=COOKIE_NAME,
        value=create_session_token(data.username),
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )
    return MeResponse(principal=data.username)


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(response: Response):
    """Clear the session cookie. Tokens are stateless, so nothing else to revoke."""
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/me", response_model=MeResponse)
def me(principal: str = Depends(get_current_principal)):
    """Return the authenticated principal."""
    return MeResponse(principal=principal)
