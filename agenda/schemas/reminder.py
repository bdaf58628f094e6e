"""Reminder schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ActiveReminderRead(BaseModel):
    """An appointment that starts soon and still needs attention."""
    appointment_id: UUID
    client_name: str
    employee_name: str | None
    service_name: str | None
    scheduled_start: datetime
    remaining: str
