"""SQLAlchemy ORM models for the scheduling core and its catalog."""

import uuid
from datetime import datetime, time
from decimal import Decimal

from sqlalchemy import (
    Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric, String,
    Text, Time, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from agenda.db.base import Base
from agenda.db.enums import DEFAULT_APPOINTMENT_STATUS


# =============================================================================
# Catalog
# =============================================================================

class Employee(Base):
    """Staff member who can be booked. Soft-deleted via is_active."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.now, nullable=False)


class Service(Base):
    """Bookable service with a fixed duration and price."""

    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_service_positive_duration"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


# =============================================================================
# Working Hours
# =============================================================================

class WorkingInterval(Base):
    """
    Weekly working interval (e.g., "Monday 08:00-12:00").

    Uses ISO weekday: Monday=1, Sunday=7.
    Several intervals per employee per day are allowed (split shifts).
    """

    __tablename__ = "working_intervals"
    __table_args__ = (
        Index("idx_working_intervals_employee_day", "employee_id", "day_of_week"),
        CheckConstraint("day_of_week >= 1 AND day_of_week <= 7", name="ck_valid_day_of_week"),
        CheckConstraint("end_time > start_time", name="ck_interval_end_after_start"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


# =============================================================================
# Appointments
# =============================================================================

class Appointment(Base):
    """
    Booked appointment.

    Lifecycle: scheduled → fulfilled/cancelled/no_show
    scheduled_end is always scheduled_start + service duration.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_employee_start", "employee_id", "scheduled_start"),
        Index("idx_appointments_reminder_scan", "reminder_sent", "status", "scheduled_start"),
        Index("idx_appointments_client", "client_document", "client_phone"),
        CheckConstraint("scheduled_end > scheduled_start", name="ck_appointment_end_after_start"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Client info
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_document: Mapped[str] = mapped_column(String(50), nullable=False)
    client_phone: Mapped[str] = mapped_column(String(30), nullable=False)

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=False
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("services.id"), nullable=False
    )

    # Scheduling (naive local time)
    scheduled_start: Mapped[datetime] = mapped_column(nullable=False)
    scheduled_end: Mapped[datetime] = mapped_column(nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_APPOINTMENT_STATUS.value, nullable=False
    )
    # Snapshot of the service price at booking time
    total_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    reminder_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=datetime.now, nullable=False)
