"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema rebuilt for every test
- Catalog fixtures (employee, services, Monday working hours)
- HTTPX AsyncClient with and without an admin session
"""
import os
from datetime import time
from decimal import Decimal
from typing import AsyncGenerator, Generator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

# Configure before any agenda import reads settings
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["REMINDER_SCANNER_ENABLED"] = "false"

from agenda.main import app
from agenda.db.base import Base
from agenda.db.session import engine, SessionLocal
from agenda.core.deps import get_db, COOKIE_NAME
from agenda.core.security import create_session_token
from agenda.db.models import Employee, Service, WorkingInterval


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test; app code may commit freely."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def employee(db: Session) -> Employee:
    emp = Employee(name="Laura Gómez", is_active=True)
    db.add(emp)
    db.commit()
    db.refresh(emp)
    return emp


@pytest.fixture
def service(db: Session) -> Service:
    """30 minute service."""
    svc = Service(name="Haircut", duration_minutes=30, cost=Decimal("25.00"), is_active=True)
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@pytest.fixture
def long_service(db: Session) -> Service:
    """60 minute service."""
    svc = Service(name="Color treatment", duration_minutes=60, cost=Decimal("80.50"), is_active=True)
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@pytest.fixture
def monday_hours(db: Session, employee: Employee) -> WorkingInterval:
    """Monday 08:00-12:00."""
    interval = WorkingInterval(
        employee_id=employee.id,
        day_of_week=1,
        start_time=time(8, 0),
        end_time=time(12, 0),
        is_active=True,
    )
    db.add(interval)
    db.commit()
    db.refresh(interval)
    return interval


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public endpoints.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated AsyncClient with JWT cookie and CSRF header.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={COOKIE_NAME: create_session_token("admin")},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def reminder_scanner():
    """The application's scanner, emptied around each test."""
    scanner = app.state.reminder_scanner
    scanner.clear()
    yield scanner
    scanner.clear()
