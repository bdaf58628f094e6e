"""Client self-service - clients manage their own appointments.

A client is identified by the (document, phone) pair given at booking time.
Only scheduled appointments are visible, and a client may only cancel an
appointment that carries their identity.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from agenda.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from agenda.core.structured_logging import build_log_context
from agenda.db.enums import AppointmentStatus
from agenda.db.models import Appointment

logger = logging.getLogger(__name__)


def list_scheduled_for_client(db: Session, document: str, phone: str) -> list[Appointment]:
    """Scheduled appointments for the client, soonest first."""
    return db.query(Appointment).filter(
        Appointment.client_document == document,
        Appointment.client_phone == phone,
        Appointment.status == AppointmentStatus.SCHEDULED.value,
    ).order_by(Appointment.scheduled_start).all()


def client_has_scheduled(db: Session, document: str, phone: str) -> bool:
    """True if the client has at least one scheduled appointment."""
    return db.query(Appointment.id).filter(
        Appointment.client_document == document,
        Appointment.client_phone == phone,
        Appointment.status == AppointmentStatus.SCHEDULED.value,
    ).first() is not None


def cancel_by_client(
    db: Session,
    appointment_id: UUID,
    document: str,
    phone: str,
) -> Appointment:
    """Cancel a scheduled appointment on behalf of the client who booked it."""
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise NotFoundError("Appointment not found")

    if appointment.client_document != document or appointment.client_phone != phone:
        raise AuthorizationError("This appointment does not belong to you")

    if appointment.status != AppointmentStatus.SCHEDULED.value:
        raise ConflictError("Only scheduled appointments can be cancelled")

    appointment.status = AppointmentStatus.CANCELLED.value
    db.commit()
    db.refresh(appointment)
    logger.info("Appointment cancelled by client", extra=build_log_context(appointment_id=appointment_id))
    return appointment
