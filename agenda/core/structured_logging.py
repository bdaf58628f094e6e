"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any
from uuid import UUID


def build_log_context(
    *,
    principal: str | None = None,
    employee_id: UUID | str | None = None,
    appointment_id: UUID | str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict without client-identifying fields."""
    context: dict[str, Any] = {}
    if principal:
        context["principal"] = principal
    if employee_id:
        context["employee_id"] = str(employee_id)
    if appointment_id:
        context["appointment_id"] = str(appointment_id)
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup for the API process and the CLI."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
