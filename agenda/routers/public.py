"""Public router - client self-service.

Unauthenticated endpoints for clients to:
- Book an appointment
- Check whether they have scheduled appointments
- List their scheduled appointments
- Cancel one of them

Clients identify themselves with the document and phone they booked with.
Rate limited to slow down identity guessing.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from agenda.core.config import settings
from agenda.core.deps import get_db, get_reminder_scanner
from agenda.core.rate_limit import limiter
from agenda.schemas.appointment import (
    ClientAppointmentRead,
    ClientIdentity,
    ClientVerifyResponse,
    PublicAppointmentCreate,
)
from agenda.services import appointment_service, catalog_service, client_appointment_service
from agenda.services.reminder_service import ReminderScanner

router = APIRouter()

PUBLIC_LIMIT = f"{settings.RATE_LIMIT_PUBLIC}/minute"


def _appointment_to_public_read(appt, db: Session) -> ClientAppointmentRead:
    """Convert Appointment to the public-safe view."""
    employee = catalog_service.get_employee(db, appt.employee_id)
    service = catalog_service.get_service(db, appt.service_id)
    return ClientAppointmentRead(
        id=appt.id,
        employee_name=employee.name if employee else None,
        service_name=service.name if service else None,
        scheduled_start=appt.scheduled_start,
        scheduled_end=appt.scheduled_end,
        status=appt.status,
        total_cost=appt.total_cost,
    )


@router.post("", response_model=ClientAppointmentRead, status_code=201)
@limiter.limit(PUBLIC_LIMIT)
def book_appointment(
    data: PublicAppointmentCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Book an appointment. Clients always start in the scheduled state."""
    appt = appointment_service.create_appointment(
        db,
        client_name=data.client_name,
        client_document=data.client_document,
        client_phone=data.client_phone,
        employee_id=data.employee_id,
        service_id=data.service_id,
        scheduled_start=data.scheduled_start,
    )
    return _appointment_to_public_read(appt, db)


@router.post("/verify-client", response_model=ClientVerifyResponse)
@limiter.limit(PUBLIC_LIMIT)
def verify_client(
    data: ClientIdentity,
    request: Request,
    db: Session = Depends(get_db),
):
    exists = client_appointment_service.client_has_scheduled(db, data.document, data.phone)
    return ClientVerifyResponse(exists=exists)


@router.post("/mine", response_model=list[ClientAppointmentRead])
@limiter.limit(PUBLIC_LIMIT)
def list_my_appointments(
    data: ClientIdentity,
    request: Request,
    db: Session = Depends(get_db),
):
    """Scheduled appointments booked with this identity."""
    appts = client_appointment_service.list_scheduled_for_client(db, data.document, data.phone)
    return [_appointment_to_public_read(a, db) for a in appts]


@router.post("/{appointment_id}/cancel", response_model=ClientAppointmentRead)
@limiter.limit(PUBLIC_LIMIT)
def cancel_my_appointment(
    appointment_id: UUID,
    data: ClientIdentity,
    request: Request,
    scanner: ReminderScanner = Depends(get_reminder_scanner),
    db: Session = Depends(get_db),
):
    appt = client_appointment_service.cancel_by_client(db, appointment_id, data.document, data.phone)
    scanner.dismiss(appointment_id)
    return _appointment_to_public_read(appt, db)
