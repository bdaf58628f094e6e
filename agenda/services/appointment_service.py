"""Appointment service - booking lifecycle for staff appointments.

Handles:
- Conflict detection against the employee's existing appointments
- Booking creation (validate, compute end, conflict check, working hours, persist)
- Status overwrite within the closed status set
- Reschedule with end recomputation
- Administrative hard delete
"""

import logging
from datetime import date, datetime, time, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from agenda.core.config import settings
from agenda.core.exceptions import ConflictError, NotFoundError, ValidationError
from agenda.core.structured_logging import build_log_context
from agenda.db.enums import (
    APPOINTMENT_STATUS_VALUES,
    DEFAULT_APPOINTMENT_STATUS,
    AppointmentStatus,
)
from agenda.db.models import Appointment, Employee, Service
from agenda.services import working_hours_service

logger = logging.getLogger(__name__)


def _normalize_status(status: AppointmentStatus | str) -> str:
    value = status.value if isinstance(status, AppointmentStatus) else status
    if value not in APPOINTMENT_STATUS_VALUES:
        allowed = ", ".join(sorted(APPOINTMENT_STATUS_VALUES))
        raise ValidationError(f"Invalid status '{value}'. Allowed: {allowed}")
    return value


# =============================================================================
# Conflict Detection
# =============================================================================

def windows_overlap(
    start: datetime,
    end: datetime,
    other_start: datetime,
    other_end: datetime,
) -> bool:
    """Half-open overlap test: touching windows do not overlap."""
    return not (end <= other_start or start >= other_end)


def _blocking_query(
    db: Session,
    employee_id: UUID,
    start: datetime,
    end: datetime,
    exclude_appointment_id: UUID | None,
    include_cancelled: bool | None,
):
    if include_cancelled is None:
        include_cancelled = not settings.CANCELLED_FREES_SLOT

    query = db.query(Appointment).filter(
        Appointment.employee_id == employee_id,
        Appointment.scheduled_start < end,
        Appointment.scheduled_end > start,
    )
    if not include_cancelled:
        query = query.filter(Appointment.status != AppointmentStatus.CANCELLED.value)
    if exclude_appointment_id:
        query = query.filter(Appointment.id != exclude_appointment_id)
    return query


def has_conflict(
    db: Session,
    employee_id: UUID,
    start: datetime,
    end: datetime,
    exclude_appointment_id: UUID | None = None,
    include_cancelled: bool | None = None,
) -> bool:
    """
    True if [start, end) overlaps any appointment of the same employee.

    Two windows overlap unless one ends at or before the other starts, so
    back-to-back appointments are allowed. Cancelled appointments are
    ignored unless include_cancelled is True; when it is None the
    CANCELLED_FREES_SLOT setting decides.
    """
    query = _blocking_query(db, employee_id, start, end, exclude_appointment_id, include_cancelled)
    return query.first() is not None


def get_blocking_appointments(
    db: Session,
    employee_id: UUID,
    start: datetime,
    end: datetime,
    include_cancelled: bool | None = None,
) -> list[Appointment]:
    """Appointments of the employee that block any part of [start, end)."""
    query = _blocking_query(db, employee_id, start, end, None, include_cancelled)
    return query.order_by(Appointment.scheduled_start).all()


# =============================================================================
# Booking
# =============================================================================

def create_appointment(
    db: Session,
    client_name: str,
    client_document: str,
    client_phone: str,
    employee_id: UUID,
    service_id: UUID,
    scheduled_start: datetime | None,
    initial_status: AppointmentStatus | str | None = None,
) -> Appointment:
    """
    Create a booking.

    Checks run in a fixed order and the first failure wins:
    missing start, unknown employee, unknown service, unknown initial
    status, overlap with an existing appointment, then working-hours
    containment.
    """
    if scheduled_start is None:
        raise ValidationError("Start date and time are required")

    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError("Employee not found")

    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise NotFoundError("Service not found")

    status = _normalize_status(initial_status or DEFAULT_APPOINTMENT_STATUS)

    scheduled_end = scheduled_start + timedelta(minutes=service.duration_minutes)
    log_context = build_log_context(employee_id=employee_id)

    if has_conflict(db, employee_id, scheduled_start, scheduled_end):
        logger.info("Booking rejected: slot taken at %s", scheduled_start, extra=log_context)
        raise ConflictError("The employee already has an appointment at that time")

    if not working_hours_service.fits_working_hours(db, employee_id, scheduled_start, scheduled_end):
        logger.info("Booking rejected: outside working hours at %s", scheduled_start, extra=log_context)
        raise ValidationError("The employee does not work at that time")

    appointment = Appointment(
        client_name=client_name,
        client_document=client_document,
        client_phone=client_phone,
        employee_id=employee_id,
        service_id=service_id,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
        status=status,
        total_cost=service.cost,
        reminder_sent=False,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    logger.info(
        "Appointment booked for %s",
        scheduled_start,
        extra=build_log_context(employee_id=employee_id, appointment_id=appointment.id),
    )
    return appointment


def reschedule_appointment(
    db: Session,
    appointment_id: UUID,
    new_start: datetime | None,
) -> Appointment:
    """
    Move an appointment to a new start time.

    The end is recomputed from the service's current duration. The
    appointment itself is excluded from the conflict check. The reminder
    flag is reset so the new start gets its own reminder; callers holding
    a ReminderScanner drop the entry for the old start.
    """
    if new_start is None:
        raise ValidationError("Start date and time are required")

    appointment = get_appointment(db, appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")
    if appointment.status != AppointmentStatus.SCHEDULED.value:
        raise ConflictError(f"Cannot reschedule appointment with status {appointment.status}")

    service = db.query(Service).filter(Service.id == appointment.service_id).first()
    if not service:
        raise NotFoundError("Service not found")

    new_end = new_start + timedelta(minutes=service.duration_minutes)
    if has_conflict(
        db,
        appointment.employee_id,
        new_start,
        new_end,
        exclude_appointment_id=appointment.id,
    ):
        raise ConflictError("The employee already has an appointment at that time")
    if not working_hours_service.fits_working_hours(db, appointment.employee_id, new_start, new_end):
        raise ValidationError("The employee does not work at that time")

    appointment.scheduled_start = new_start
    appointment.scheduled_end = new_end
    appointment.reminder_sent = False
    db.commit()
    db.refresh(appointment)
    logger.info(
        "Appointment moved to %s",
        new_start,
        extra=build_log_context(appointment_id=appointment.id),
    )
    return appointment


# =============================================================================
# Lifecycle
# =============================================================================

def set_status(
    db: Session,
    appointment_id: UUID,
    new_status: AppointmentStatus | str,
) -> Appointment:
    """Overwrite the status. Any status in the closed set may follow any other."""
    value = _normalize_status(new_status)
    appointment = get_appointment(db, appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")

    appointment.status = value
    db.commit()
    db.refresh(appointment)
    logger.info(
        "Appointment status set to %s",
        value,
        extra=build_log_context(appointment_id=appointment_id),
    )
    return appointment


def delete_appointment(db: Session, appointment_id: UUID) -> None:
    """Hard delete, regardless of status."""
    appointment = get_appointment(db, appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")
    db.delete(appointment)
    db.commit()
    logger.info("Appointment deleted", extra=build_log_context(appointment_id=appointment_id))


# =============================================================================
# Queries
# =============================================================================

def get_appointment(db: Session, appointment_id: UUID) -> Appointment | None:
    """Get appointment by ID."""
    return db.query(Appointment).filter(Appointment.id == appointment_id).first()


def list_appointments(
    db: Session,
    employee_id: UUID | None = None,
    on_date: date | None = None,
    status: str | None = None,
) -> list[Appointment]:
    """List appointments ordered by start, with optional filters."""
    query = db.query(Appointment)
    if employee_id:
        query = query.filter(Appointment.employee_id == employee_id)
    if on_date:
        query = query.filter(
            Appointment.scheduled_start >= datetime.combine(on_date, time.min),
            Appointment.scheduled_start <= datetime.combine(on_date, time.max),
        )
    if status:
        query = query.filter(Appointment.status == status)
    return query.order_by(Appointment.scheduled_start).all()


def list_for_employee_on(db: Session, employee_id: UUID, on_date: date) -> list[Appointment]:
    """An employee's appointments starting on the given date."""
    return list_appointments(db, employee_id=employee_id, on_date=on_date)
