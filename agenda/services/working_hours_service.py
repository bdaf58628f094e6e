"""Working hours service - weekly working intervals per employee.

Handles:
- Active interval lookup per ISO weekday (Monday=1, Sunday=7)
- Working-hours containment check for a proposed appointment window
- Interval management (add, bulk add, soft delete)
"""

import logging
from datetime import datetime, time
from typing import Iterable, NamedTuple
from uuid import UUID

from sqlalchemy.orm import Session

from agenda.core.exceptions import NotFoundError, ValidationError
from agenda.db.models import Employee, WorkingInterval

logger = logging.getLogger(__name__)


class IntervalInput(NamedTuple):
    """One interval to add for an employee."""
    day_of_week: int
    start_time: time | None
    end_time: time | None


# =============================================================================
# Calendar Queries
# =============================================================================

def active_intervals_for(db: Session, employee_id: UUID, weekday: int) -> list[WorkingInterval]:
    """Active intervals for an employee on an ISO weekday, ordered by start time."""
    return db.query(WorkingInterval).filter(
        WorkingInterval.employee_id == employee_id,
        WorkingInterval.day_of_week == weekday,
        WorkingInterval.is_active == True,  # noqa: E712
    ).order_by(WorkingInterval.start_time).all()


def works_on(db: Session, employee_id: UUID, weekday: int) -> bool:
    """True if the employee has at least one active interval on the weekday."""
    return len(active_intervals_for(db, employee_id, weekday)) > 0


def fits_working_hours(
    db: Session,
    employee_id: UUID,
    start: datetime,
    end: datetime,
) -> bool:
    """
    True if [start, end) lies entirely inside one active interval.

    Windows that cross midnight never fit: intervals are same-day time ranges.
    """
    if end.date() != start.date():
        return False
    start_t = start.time()
    end_t = end.time()
    for interval in active_intervals_for(db, employee_id, start.isoweekday()):
        if interval.start_time <= start_t and interval.end_time >= end_t:
            return True
    return False


def list_intervals(db: Session, employee_id: UUID) -> list[WorkingInterval]:
    """All active intervals for an employee, by weekday then start time."""
    return db.query(WorkingInterval).filter(
        WorkingInterval.employee_id == employee_id,
        WorkingInterval.is_active == True,  # noqa: E712
    ).order_by(WorkingInterval.day_of_week, WorkingInterval.start_time).all()


# =============================================================================
# Interval Management
# =============================================================================

def _validate_interval(day_of_week: int, start_time: time | None, end_time: time | None) -> None:
    if day_of_week is None or not 1 <= day_of_week <= 7:
        raise ValidationError("Day of week must be between 1 (Monday) and 7 (Sunday)")
    if start_time is None or end_time is None:
        raise ValidationError("Start and end time are required")
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")


def _require_employee(db: Session, employee_id: UUID) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


def add_interval(
    db: Session,
    employee_id: UUID,
    day_of_week: int,
    start_time: time | None,
    end_time: time | None,
) -> WorkingInterval:
    """Add one active working interval."""
    _validate_interval(day_of_week, start_time, end_time)
    _require_employee(db, employee_id)

    interval = WorkingInterval(
        employee_id=employee_id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        is_active=True,
    )
    db.add(interval)
    db.commit()
    db.refresh(interval)
    return interval


def add_intervals(
    db: Session,
    employee_id: UUID,
    intervals: Iterable[IntervalInput],
) -> list[WorkingInterval]:
    """
    Add several intervals at once.

    All inputs are validated before anything is written, so a bad entry
    leaves the calendar untouched.
    """
    intervals = list(intervals)
    for item in intervals:
        _validate_interval(item.day_of_week, item.start_time, item.end_time)
    _require_employee(db, employee_id)

    created = [
        WorkingInterval(
            employee_id=employee_id,
            day_of_week=item.day_of_week,
            start_time=item.start_time,
            end_time=item.end_time,
            is_active=True,
        )
        for item in intervals
    ]
    db.add_all(created)
    db.commit()
    for interval in created:
        db.refresh(interval)
    return created


def deactivate_interval(
    db: Session,
    interval_id: UUID,
    employee_id: UUID | None = None,
) -> WorkingInterval:
    """Soft-delete one interval, optionally scoped to its employee."""
    query = db.query(WorkingInterval).filter(WorkingInterval.id == interval_id)
    if employee_id:
        query = query.filter(WorkingInterval.employee_id == employee_id)
    interval = query.first()
    if not interval:
        raise NotFoundError("Working interval not found")
    interval.is_active = False
    db.commit()
    db.refresh(interval)
    return interval


def deactivate_all_intervals(db: Session, employee_id: UUID) -> int:
    """Soft-delete every active interval of an employee. Returns the count."""
    updated = db.query(WorkingInterval).filter(
        WorkingInterval.employee_id == employee_id,
        WorkingInterval.is_active == True,  # noqa: E712
    ).update({WorkingInterval.is_active: False}, synchronize_session=False)
    db.commit()
    logger.info("Deactivated %s working intervals for employee %s", updated, employee_id)
    return updated
