"""Scheduling error taxonomy.

Every error raised by the scheduling core derives from SchedulingError and
carries a machine-readable kind plus a human message. The API layer maps each
kind to an HTTP status in one place (see agenda.main).
"""


class SchedulingError(Exception):
    """Base exception for scheduling operations."""

    kind = "scheduling_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """Input is missing, malformed, or outside working hours."""

    kind = "validation_error"
    status_code = 400


class NotFoundError(SchedulingError):
    """A referenced employee, service, interval or appointment does not exist."""

    kind = "not_found"
    status_code = 404


class ConflictError(SchedulingError):
    """Overlap with an existing appointment, or an illegal state for the operation."""

    kind = "conflict"
    status_code = 409


class AuthorizationError(SchedulingError):
    """Caller identity does not match the appointment."""

    kind = "forbidden"
    status_code = 403
