"""Reminder scanner - promotes upcoming appointments to active reminders.

On every tick, scheduled appointments that start within the lead window and
have not been notified yet are added to an in-memory set of active reminders
and durably flagged as notified. Entries whose start is older than the
retention window are swept. Staff read the set and dismiss entries; nothing
is delivered outside the process.

The set lives on a ReminderScanner instance owned by the application (see
agenda.main). It is guarded by a lock because request threads and the tick
thread both touch it.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, NamedTuple
from uuid import UUID

import anyio
from sqlalchemy.orm import Session

from agenda.core.constants import REMINDER_LEAD_MINUTES, REMINDER_RETENTION_HOURS
from agenda.core.structured_logging import build_log_context
from agenda.db.enums import AppointmentStatus
from agenda.db.models import Appointment, Employee, Service

logger = logging.getLogger(__name__)


class ActiveReminder(NamedTuple):
    """Active reminder enriched for display."""
    appointment_id: UUID
    client_name: str
    employee_name: str | None
    service_name: str | None
    scheduled_start: datetime
    remaining: str


def format_remaining(start: datetime, now: datetime) -> str:
    """Human-readable time until start: 'Now', 'N minutes' or 'Hh Mm'."""
    minutes = int((start - now).total_seconds() // 60)
    if minutes <= 0:
        return "Now"
    if minutes < 60:
        return f"{minutes} minutes"
    return f"{minutes // 60}h {minutes % 60}m"


def find_due(
    db: Session,
    now: datetime,
    lead_minutes: int = REMINDER_LEAD_MINUTES,
) -> list[Appointment]:
    """Scheduled, not yet notified appointments starting within [now, now + lead]."""
    deadline = now + timedelta(minutes=lead_minutes)
    return db.query(Appointment).filter(
        Appointment.reminder_sent == False,  # noqa: E712
        Appointment.status == AppointmentStatus.SCHEDULED.value,
        Appointment.scheduled_start >= now,
        Appointment.scheduled_start <= deadline,
    ).order_by(Appointment.scheduled_start).all()


class ReminderScanner:
    """Owns the active-reminder set and the periodic scan over appointments."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        lead_minutes: int = REMINDER_LEAD_MINUTES,
        retention_hours: int = REMINDER_RETENTION_HOURS,
    ):
        self._session_factory = session_factory
        self._lead_minutes = lead_minutes
        self._retention = timedelta(hours=retention_hours)
        self._active: dict[UUID, datetime] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Scan
    # =========================================================================

    def tick(self, db: Session, now: datetime | None = None) -> int:
        """
        Run one scan and sweep. Returns the number of newly promoted appointments.

        Exceptions propagate; run_tick is the isolating wrapper used by the
        background loop.
        """
        now = now or datetime.now()
        due = find_due(db, now, self._lead_minutes)

        for appt in due:
            appt.reminder_sent = True
        if due:
            db.commit()

        promoted = 0
        with self._lock:
            for appt in due:
                if appt.id not in self._active:
                    self._active[appt.id] = appt.scheduled_start
                    promoted += 1
        for appt in due:
            logger.info(
                "Reminder active for appointment at %s",
                appt.scheduled_start,
                extra=build_log_context(appointment_id=appt.id, employee_id=appt.employee_id),
            )

        swept = self.sweep(now)
        if swept:
            logger.debug("Swept %s stale reminders", swept)
        return promoted

    def sweep(self, now: datetime | None = None) -> int:
        """Drop entries whose start is older than the retention window."""
        now = now or datetime.now()
        cutoff = now - self._retention
        with self._lock:
            stale = [appt_id for appt_id, start in self._active.items() if start < cutoff]
            for appt_id in stale:
                del self._active[appt_id]
        return len(stale)

    def run_tick(self) -> int:
        """Run one tick in a fresh session. Failures are logged, never raised."""
        with self._session_factory() as db:
            try:
                return self.tick(db)
            except Exception:
                db.rollback()
                logger.error("Reminder scan failed", exc_info=True)
                return 0

    async def run_forever(self, interval_seconds: float) -> None:
        """Scan every interval_seconds until cancelled."""
        logger.info("Reminder scanner starting (interval: %ss)", interval_seconds)
        while True:
            await anyio.to_thread.run_sync(self.run_tick)
            await asyncio.sleep(interval_seconds)

    # =========================================================================
    # Active Set
    # =========================================================================

    def list_active(self, db: Session, now: datetime | None = None) -> list[ActiveReminder]:
        """
        Active reminders with names and time remaining, soonest first.

        Entries whose appointment has since been deleted are skipped.
        """
        now = now or datetime.now()
        with self._lock:
            entries = sorted(self._active.items(), key=lambda item: item[1])

        reminders: list[ActiveReminder] = []
        for appt_id, start in entries:
            appt = db.query(Appointment).filter(Appointment.id == appt_id).first()
            if not appt:
                continue
            employee = db.query(Employee).filter(Employee.id == appt.employee_id).first()
            service = db.query(Service).filter(Service.id == appt.service_id).first()
            reminders.append(
                ActiveReminder(
                    appointment_id=appt.id,
                    client_name=appt.client_name,
                    employee_name=employee.name if employee else None,
                    service_name=service.name if service else None,
                    scheduled_start=appt.scheduled_start,
                    remaining=format_remaining(appt.scheduled_start, now),
                )
            )
        return reminders

    def dismiss(self, appointment_id: UUID) -> None:
        """Remove an entry. Dismissing an unknown id is a no-op."""
        with self._lock:
            self._active.pop(appointment_id, None)

    def is_active(self, appointment_id: UUID) -> bool:
        with self._lock:
            return appointment_id in self._active

    def active_ids(self) -> set[UUID]:
        with self._lock:
            return set(self._active)

    def clear(self) -> None:
        """Drop every entry (application shutdown)."""
        with self._lock:
            self._active.clear()
