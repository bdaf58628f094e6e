"""Employees router - staff, their working hours and availability.

Reads are open so the client-facing booking flow can use them; every
mutation needs an authenticated session and the CSRF header.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from agenda.core.deps import get_current_principal, get_db, require_csrf_header
from agenda.schemas.appointment import AvailabilityCheckResponse, ScheduleBandRead
from agenda.schemas.catalog import (
    EmployeeCreate,
    EmployeeRead,
    EmployeeUpdate,
    WorkingIntervalInput,
    WorkingIntervalRead,
    WorkingIntervalsSet,
    WorksOnResponse,
)
from agenda.services import availability_service, catalog_service, working_hours_service
from agenda.services.working_hours_service import IntervalInput

router = APIRouter()


def _require_employee(db: Session, employee_id: UUID):
    employee = catalog_service.get_employee(db, employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


# =============================================================================
# Employees
# =============================================================================

@router.get("", response_model=list[EmployeeRead])
def list_employees(db: Session = Depends(get_db)):
    """List active employees."""
    return catalog_service.list_employees(db)


@router.get("/{employee_id}", response_model=EmployeeRead)
def get_employee(employee_id: UUID, db: Session = Depends(get_db)):
    return _require_employee(db, employee_id)


@router.post(
    "",
    response_model=EmployeeRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_employee(
    data: EmployeeCreate,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return catalog_service.create_employee(db, data.name)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_employee(
    employee_id: UUID,
    data: EmployeeUpdate,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return catalog_service.update_employee(
        db, employee_id, name=data.name, is_active=data.is_active
    )


@router.delete(
    "/{employee_id}",
    response_model=EmployeeRead,
    dependencies=[Depends(require_csrf_header)],
)
def deactivate_employee(
    employee_id: UUID,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Soft-delete an employee."""
    return catalog_service.deactivate_employee(db, employee_id)


# =============================================================================
# Working Hours
# =============================================================================

@router.get("/{employee_id}/hours", response_model=list[WorkingIntervalRead])
def list_working_hours(employee_id: UUID, db: Session = Depends(get_db)):
    _require_employee(db, employee_id)
    return working_hours_service.list_intervals(db, employee_id)


@router.post(
    "/{employee_id}/hours",
    response_model=WorkingIntervalRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_working_interval(
    employee_id: UUID,
    data: WorkingIntervalInput,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return working_hours_service.add_interval(
        db, employee_id, data.day_of_week, data.start_time, data.end_time
    )


@router.post(
    "/{employee_id}/hours/bulk",
    response_model=list[WorkingIntervalRead],
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_working_intervals(
    employee_id: UUID,
    data: WorkingIntervalsSet,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return working_hours_service.add_intervals(
        db,
        employee_id,
        [IntervalInput(i.day_of_week, i.start_time, i.end_time) for i in data.intervals],
    )


@router.delete(
    "/{employee_id}/hours",
    dependencies=[Depends(require_csrf_header)],
)
def deactivate_all_working_hours(
    employee_id: UUID,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _require_employee(db, employee_id)
    count = working_hours_service.deactivate_all_intervals(db, employee_id)
    return {"deactivated": count}


@router.delete(
    "/{employee_id}/hours/{interval_id}",
    response_model=WorkingIntervalRead,
    dependencies=[Depends(require_csrf_header)],
)
def deactivate_working_interval(
    employee_id: UUID,
    interval_id: UUID,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return working_hours_service.deactivate_interval(db, interval_id, employee_id=employee_id)


@router.get("/{employee_id}/works-on/{day_of_week}", response_model=WorksOnResponse)
def works_on(
    employee_id: UUID,
    day_of_week: int = Path(..., ge=1, le=7),
    db: Session = Depends(get_db),
):
    """Does the employee work on this ISO weekday (Monday=1)."""
    return WorksOnResponse(
        employee_id=employee_id,
        day_of_week=day_of_week,
        works=working_hours_service.works_on(db, employee_id, day_of_week),
    )


# =============================================================================
# Availability
# =============================================================================

@router.get("/{employee_id}/availability", response_model=AvailabilityCheckResponse)
def check_availability(
    employee_id: UUID,
    on_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Coarse check: any free reference-length slot on the date."""
    _require_employee(db, employee_id)
    return AvailabilityCheckResponse(
        employee_id=employee_id,
        on_date=on_date,
        available=availability_service.has_any_availability(db, employee_id, on_date),
    )


@router.get("/{employee_id}/day-schedule", response_model=list[ScheduleBandRead])
def get_day_schedule(
    employee_id: UUID,
    on_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    _require_employee(db, employee_id)
    return [
        ScheduleBandRead(start=band.start, end=band.end, available=band.available)
        for band in availability_service.day_schedule(db, employee_id, on_date)
    ]
