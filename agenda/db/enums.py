"""Appointment and scheduling enums."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """
    Appointment lifecycle status.

    Flow: scheduled → fulfilled
              ↘ cancelled
              ↘ no_show
    """

    SCHEDULED = "scheduled"  # Booked, upcoming
    FULFILLED = "fulfilled"  # Service was delivered
    CANCELLED = "cancelled"  # Cancelled by client or staff
    NO_SHOW = "no_show"  # Client didn't show up


APPOINTMENT_STATUS_VALUES = frozenset(s.value for s in AppointmentStatus)

# Default appointment status
DEFAULT_APPOINTMENT_STATUS = AppointmentStatus.SCHEDULED
