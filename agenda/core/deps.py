"""FastAPI dependencies for authentication, database access and the reminder scanner."""

from typing import Generator

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from agenda.core.security import decode_session_token
from agenda.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "agenda_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_principal(request: Request) -> str:
    """
    Get the authenticated principal from the session cookie.

    Raises:
        HTTPException 401: Authentication failed
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid session")

    principal = payload.get("sub")
    if not principal:
        raise HTTPException(status_code=401, detail="Invalid session")
    return principal


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PUT, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )


def get_reminder_scanner(request: Request):
    """Return the ReminderScanner owned by the running application."""
    return request.app.state.reminder_scanner
