"""Availability service - bookable start times per employee and date.

Slots are recomputed on every call from the working intervals of the
date's ISO weekday and the employee's existing appointments. Nothing is
cached.
"""

from datetime import date, datetime, time, timedelta
from typing import NamedTuple
from uuid import UUID

from sqlalchemy.orm import Session

from agenda.core.constants import (
    AVAILABILITY_REFERENCE_DURATION_MINUTES,
    SLOT_INTERVAL_MINUTES,
)
from agenda.core.exceptions import NotFoundError, ValidationError
from agenda.db.models import Appointment, Service
from agenda.services import appointment_service, working_hours_service


class ScheduleBand(NamedTuple):
    """Fixed-width band of a working day with its availability."""
    start: time
    end: time
    available: bool


def _is_free(start: datetime, end: datetime, appointments: list[Appointment]) -> bool:
    for appt in appointments:
        if appointment_service.windows_overlap(start, end, appt.scheduled_start, appt.scheduled_end):
            return False
    return True


def available_slots(
    db: Session,
    employee_id: UUID,
    on_date: date,
    duration_minutes: int,
) -> list[time]:
    """
    Start times at which a service of duration_minutes can be booked.

    Each active interval is walked from its start in fixed steps; a
    candidate is kept when it ends inside the interval and overlaps no
    blocking appointment. Overlapping intervals are walked independently,
    so the same start time may appear more than once.
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationError("Service duration must be positive")

    intervals = working_hours_service.active_intervals_for(db, employee_id, on_date.isoweekday())
    if not intervals:
        return []

    day_start = datetime.combine(on_date, time.min)
    appointments = appointment_service.get_blocking_appointments(
        db, employee_id, day_start, day_start + timedelta(days=1)
    )

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=SLOT_INTERVAL_MINUTES)
    slots: list[time] = []
    for interval in intervals:
        cursor = datetime.combine(on_date, interval.start_time)
        interval_end = datetime.combine(on_date, interval.end_time)
        while cursor + duration <= interval_end:
            if _is_free(cursor, cursor + duration, appointments):
                slots.append(cursor.time())
            cursor += step
    return slots


def available_slots_for_service(
    db: Session,
    employee_id: UUID,
    on_date: date,
    service_id: UUID,
) -> list[time]:
    """available_slots using the duration of a catalog service."""
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise NotFoundError("Service not found")
    return available_slots(db, employee_id, on_date, service.duration_minutes)


def has_any_availability(db: Session, employee_id: UUID, on_date: date) -> bool:
    """Coarse check: is any reference-length slot free on the date."""
    return len(available_slots(db, employee_id, on_date, AVAILABILITY_REFERENCE_DURATION_MINUTES)) > 0


def day_schedule(db: Session, employee_id: UUID, on_date: date) -> list[ScheduleBand]:
    """
    Fixed-width bands across the employee's first working interval of the day.

    A band is unavailable when any blocking appointment overlaps it.
    """
    intervals = working_hours_service.active_intervals_for(db, employee_id, on_date.isoweekday())
    if not intervals:
        return []

    interval = intervals[0]
    cursor = datetime.combine(on_date, interval.start_time)
    interval_end = datetime.combine(on_date, interval.end_time)
    appointments = appointment_service.get_blocking_appointments(
        db, employee_id, cursor, interval_end
    )

    step = timedelta(minutes=SLOT_INTERVAL_MINUTES)
    bands: list[ScheduleBand] = []
    while cursor < interval_end:
        band_end = min(cursor + step, interval_end)
        bands.append(
            ScheduleBand(
                start=cursor.time(),
                end=band_end.time(),
                available=_is_free(cursor, band_end, appointments),
            )
        )
        cursor = band_end
    return bands
