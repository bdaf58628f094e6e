"""Reminders router - active reminders for staff."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agenda.core.deps import (
    get_current_principal,
    get_db,
    get_reminder_scanner,
    require_csrf_header,
)
from agenda.schemas.reminder import ActiveReminderRead
from agenda.services.reminder_service import ReminderScanner

router = APIRouter()


@router.get("", response_model=list[ActiveReminderRead])
def list_active_reminders(
    principal: str = Depends(get_current_principal),
    scanner: ReminderScanner = Depends(get_reminder_scanner),
    db: Session = Depends(get_db),
):
    """Appointments starting soon that nobody has dismissed yet."""
    return [ActiveReminderRead(**r._asdict()) for r in scanner.list_active(db)]


@router.post(
    "/{appointment_id}/dismiss",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def dismiss_reminder(
    appointment_id: UUID,
    principal: str = Depends(get_current_principal),
    scanner: ReminderScanner = Depends(get_reminder_scanner),
):
    """Remove a reminder from the active set. Unknown ids are ignored."""
    scanner.dismiss(appointment_id)
