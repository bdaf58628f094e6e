"""Appointment schemas - Pydantic models for appointments API."""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from agenda.db.enums import AppointmentStatus


# =============================================================================
# Appointments
# =============================================================================

class AppointmentBookingBase(BaseModel):
    """Fields every booking carries."""
    client_name: str = Field(..., min_length=1, max_length=255)
    client_document: str = Field(..., min_length=1, max_length=50)
    client_phone: str = Field(..., min_length=1, max_length=30)
    employee_id: UUID
    service_id: UUID
    scheduled_start: datetime | None = None


class AppointmentCreate(AppointmentBookingBase):
    """Staff booking. Staff may pick the initial status."""
    status: AppointmentStatus | None = None


class PublicAppointmentCreate(AppointmentBookingBase):
    """Client booking. Always starts scheduled, so status is not accepted."""
    model_config = ConfigDict(extra="forbid")


class AppointmentRead(BaseModel):
    """Schema for reading an appointment."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_name: str
    client_document: str
    client_phone: str
    employee_id: UUID
    service_id: UUID
    scheduled_start: datetime
    scheduled_end: datetime
    status: str
    total_cost: Decimal
    reminder_sent: bool
    created_at: datetime


class AppointmentStatusUpdate(BaseModel):
    """Schema for overwriting the status. Validated against the closed set by the service."""
    status: str = Field(..., min_length=1, max_length=20)


class AppointmentReschedule(BaseModel):
    """Schema for moving an appointment."""
    scheduled_start: datetime


# =============================================================================
# Slots
# =============================================================================

class AvailableSlotsResponse(BaseModel):
    """Bookable start times for an employee on a date."""
    employee_id: UUID
    on_date: date
    duration_minutes: int
    slots: list[time]


class AvailabilityCheckResponse(BaseModel):
    """Coarse availability for an employee on a date."""
    employee_id: UUID
    on_date: date
    available: bool


class ScheduleBandRead(BaseModel):
    """One band of the day schedule."""
    start: time
    end: time
    available: bool


# =============================================================================
# Client Self-Service
# =============================================================================

class ClientIdentity(BaseModel):
    """Identity a client gave when booking."""
    document: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=1, max_length=30)


class ClientVerifyResponse(BaseModel):
    """Whether the client has any scheduled appointment."""
    exists: bool


class ClientAppointmentRead(BaseModel):
    """Public-safe view of a client's appointment."""
    id: UUID
    employee_name: str | None
    service_name: str | None
    scheduled_start: datetime
    scheduled_end: datetime
    status: str
    total_cost: Decimal
