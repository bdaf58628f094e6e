"""Appointments router - staff endpoints for booking and lifecycle management."""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from agenda.core.deps import (
    get_current_principal,
    get_db,
    get_reminder_scanner,
    require_csrf_header,
)
from agenda.core.structured_logging import build_log_context
from agenda.db.enums import AppointmentStatus
from agenda.schemas.appointment import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentReschedule,
    AppointmentStatusUpdate,
    AvailableSlotsResponse,
)
from agenda.services import appointment_service, availability_service, catalog_service
from agenda.services.reminder_service import ReminderScanner

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/slots", response_model=AvailableSlotsResponse)
def get_available_slots(
    employee_id: UUID,
    service_id: UUID,
    on_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Bookable start times for a service with an employee on a date."""
    service = catalog_service.get_service(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    slots = availability_service.available_slots(db, employee_id, on_date, service.duration_minutes)
    return AvailableSlotsResponse(
        employee_id=employee_id,
        on_date=on_date,
        duration_minutes=service.duration_minutes,
        slots=slots,
    )


@router.get("", response_model=list[AppointmentRead])
def list_appointments(
    employee_id: UUID | None = None,
    on_date: date | None = Query(None, alias="date"),
    status: str | None = None,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List appointments, optionally filtered by employee, date and status."""
    return appointment_service.list_appointments(
        db, employee_id=employee_id, on_date=on_date, status=status
    )


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: UUID,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    appointment = appointment_service.get_appointment(db, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.post(
    "",
    response_model=AppointmentRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_appointment(
    data: AppointmentCreate,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Book an appointment on behalf of a client."""
    return appointment_service.create_appointment(
        db,
        client_name=data.client_name,
        client_document=data.client_document,
        client_phone=data.client_phone,
        employee_id=data.employee_id,
        service_id=data.service_id,
        scheduled_start=data.scheduled_start,
        initial_status=data.status,
    )


@router.put(
    "/{appointment_id}/status",
    response_model=AppointmentRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    request: Request,
    principal: str = Depends(get_current_principal),
    scanner: ReminderScanner = Depends(get_reminder_scanner),
    db: Session = Depends(get_db),
):
    """Overwrite the appointment status."""
    appointment = appointment_service.set_status(db, appointment_id, data.status)
    if appointment.status != AppointmentStatus.SCHEDULED.value:
        scanner.dismiss(appointment_id)
    logger.info(
        "Status updated",
        extra=build_log_context(
            principal=principal,
            appointment_id=appointment_id,
            route=request.url.path,
            method=request.method,
        ),
    )
    return appointment


@router.put(
    "/{appointment_id}/reschedule",
    response_model=AppointmentRead,
    dependencies=[Depends(require_csrf_header)],
)
def reschedule_appointment(
    appointment_id: UUID,
    data: AppointmentReschedule,
    principal: str = Depends(get_current_principal),
    scanner: ReminderScanner = Depends(get_reminder_scanner),
    db: Session = Depends(get_db),
):
    """Move a scheduled appointment. Its reminder starts over for the new time."""
    appointment = appointment_service.reschedule_appointment(db, appointment_id, data.scheduled_start)
    scanner.dismiss(appointment_id)
    return appointment


@router.delete(
    "/{appointment_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_appointment(
    appointment_id: UUID,
    request: Request,
    principal: str = Depends(get_current_principal),
    scanner: ReminderScanner = Depends(get_reminder_scanner),
    db: Session = Depends(get_db),
):
    """Permanently delete an appointment, whatever its status."""
    appointment_service.delete_appointment(db, appointment_id)
    scanner.dismiss(appointment_id)
    logger.info(
        "Appointment deleted by staff",
        extra=build_log_context(
            principal=principal,
            appointment_id=appointment_id,
            route=request.url.path,
            method=request.method,
        ),
    )
