"""FastAPI application entry point."""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from agenda.core.config import settings
from agenda.core.exceptions import SchedulingError
from agenda.core.structured_logging import configure_logging
from agenda.db.session import SessionLocal, engine
from agenda.services.reminder_service import ReminderScanner

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # Client documents and phones stay out of Sentry
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from agenda.core.rate_limit import limiter


# ============================================================================
# Lifespan (reminder scanner)
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    scanner: ReminderScanner = app.state.reminder_scanner

    scanner_task: asyncio.Task | None = None
    if settings.REMINDER_SCANNER_ENABLED:
        scanner_task = asyncio.create_task(
            scanner.run_forever(settings.REMINDER_INTERVAL_SECONDS)
        )

    yield

    if scanner_task:
        scanner_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scanner_task
    scanner.clear()
    logger.info("Reminder scanner stopped")


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Agenda API",
    description="Appointment scheduling and availability API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
    lifespan=lifespan,
)

# Owned by the app; the lifespan only starts and stops its loop.
app.state.reminder_scanner = ReminderScanner(SessionLocal)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    """Map scheduling errors to their HTTP status with a machine-readable kind."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


app.add_exception_handler(SchedulingError, scheduling_error_handler)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)

# ============================================================================
# Routers
# ============================================================================

from agenda.routers import appointments, auth, employees, public, reminders, service_catalog

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(employees.router, prefix="/employees", tags=["employees"])
app.include_router(service_catalog.router, prefix="/services", tags=["services"])
app.include_router(appointments.router, prefix="/appointments", tags=["appointments"])

# Client self-service (unauthenticated)
app.include_router(public.router, prefix="/public/appointments", tags=["public"])

app.include_router(reminders.router, prefix="/reminders", tags=["reminders"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
