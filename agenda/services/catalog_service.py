"""Catalog service - employees and bookable services."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from agenda.core.exceptions import NotFoundError, ValidationError
from agenda.db.models import Employee, Service


# =============================================================================
# Employees
# =============================================================================

def create_employee(db: Session, name: str) -> Employee:
    """Create an active employee."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Employee name is required")
    employee = Employee(name=name, is_active=True)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def get_employee(db: Session, employee_id: UUID) -> Employee | None:
    """Get employee by ID (active or not)."""
    return db.query(Employee).filter(Employee.id == employee_id).first()


def list_employees(db: Session, active_only: bool = True) -> list[Employee]:
    """List employees ordered by name."""
    query = db.query(Employee)
    if active_only:
        query = query.filter(Employee.is_active == True)  # noqa: E712
    return query.order_by(Employee.name).all()


def update_employee(
    db: Session,
    employee_id: UUID,
    name: str | None = None,
    is_active: bool | None = None,
) -> Employee:
    """Update employee fields that were provided."""
    employee = get_employee(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Employee name is required")
        employee.name = name
    if is_active is not None:
        employee.is_active = is_active
    db.commit()
    db.refresh(employee)
    return employee


def deactivate_employee(db: Session, employee_id: UUID) -> Employee:
    """Soft-delete an employee. Existing appointments are kept."""
    return update_employee(db, employee_id, is_active=False)


# =============================================================================
# Services
# =============================================================================

def create_service(
    db: Session,
    name: str,
    duration_minutes: int,
    cost: Decimal,
    description: str | None = None,
) -> Service:
    """Create an active service."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Service name is required")
    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationError("Service duration must be positive")
    if cost is None or Decimal(cost) < 0:
        raise ValidationError("Service cost cannot be negative")

    service = Service(
        name=name,
        description=description,
        duration_minutes=duration_minutes,
        cost=Decimal(cost),
        is_active=True,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def get_service(db: Session, service_id: UUID) -> Service | None:
    """Get service by ID."""
    return db.query(Service).filter(Service.id == service_id).first()


def list_services(db: Session, active_only: bool = True) -> list[Service]:
    """List services ordered by name."""
    query = db.query(Service)
    if active_only:
        query = query.filter(Service.is_active == True)  # noqa: E712
    return query.order_by(Service.name).all()
