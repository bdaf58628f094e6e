"""CLI tools for agenda administration."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID

import click

from agenda.core.config import settings
from agenda.core.constants import REMINDER_LEAD_MINUTES
from agenda.core.exceptions import SchedulingError
from agenda.core.structured_logging import configure_logging
from agenda.db.base import Base
from agenda.db.session import SessionLocal, engine
from agenda.services import catalog_service, working_hours_service
from agenda.services.reminder_service import find_due


def _parse_time(value: str):
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        raise click.BadParameter(f"'{value}' is not HH:MM")


@click.group()
def cli():
    """Agenda CLI tools."""
    configure_logging(settings.LOG_LEVEL)


@cli.command()
def init_db():
    """
    Create all tables directly from the models.

    For local development and tests. Deployed databases use alembic.
    """
    import agenda.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    click.echo("✓ Database tables created")


@cli.command()
@click.option("--name", required=True, help="Employee display name")
def create_employee(name: str):
    """Create an active employee."""
    with SessionLocal() as db:
        try:
            employee = catalog_service.create_employee(db, name)
        except SchedulingError as e:
            click.echo(f"❌ {e.message}")
            raise SystemExit(1)
        click.echo(f"✓ Created employee: {employee.name}")
        click.echo(f"  ID: {employee.id}")


@cli.command()
@click.option("--name", required=True, help="Service name")
@click.option("--duration", "duration_minutes", required=True, type=int, help="Duration in minutes")
@click.option("--cost", required=True, help="Price, e.g. 25.00")
@click.option("--description", default=None, help="Optional description")
def create_service(name: str, duration_minutes: int, cost: str, description: str | None):
    """Create an active service."""
    try:
        price = Decimal(cost)
    except InvalidOperation:
        raise click.BadParameter(f"'{cost}' is not a valid amount", param_hint="--cost")

    with SessionLocal() as db:
        try:
            service = catalog_service.create_service(
                db, name=name, duration_minutes=duration_minutes, cost=price, description=description
            )
        except SchedulingError as e:
            click.echo(f"❌ {e.message}")
            raise SystemExit(1)
        click.echo(f"✓ Created service: {service.name} ({service.duration_minutes} min)")
        click.echo(f"  ID: {service.id}")


@cli.command()
@click.option("--employee-id", required=True, type=click.UUID, help="Employee ID")
@click.option("--day", "day_of_week", required=True, type=click.IntRange(1, 7), help="ISO weekday, Monday=1")
@click.option("--start", "start", required=True, help="Start time HH:MM")
@click.option("--end", "end", required=True, help="End time HH:MM")
def add_hours(employee_id: UUID, day_of_week: int, start: str, end: str):
    """Add a working interval for an employee."""
    start_time = _parse_time(start)
    end_time = _parse_time(end)
    with SessionLocal() as db:
        try:
            interval = working_hours_service.add_interval(
                db, employee_id, day_of_week, start_time, end_time
            )
        except SchedulingError as e:
            click.echo(f"❌ {e.message}")
            raise SystemExit(1)
        click.echo(
            f"✓ Added day {interval.day_of_week} "
            f"{interval.start_time:%H:%M}-{interval.end_time:%H:%M}"
        )


@cli.command()
def due_reminders():
    """
    List appointments that are due for a reminder.

    Read-only: the running API owns the reminder flags and the active set.
    """
    with SessionLocal() as db:
        due = find_due(db, datetime.now())
        for appt in due:
            click.echo(f"  {appt.scheduled_start:%Y-%m-%d %H:%M}  {appt.client_name}  ({appt.id})")
    click.echo(f"✓ {len(due)} appointments due within {REMINDER_LEAD_MINUTES} minutes")


if __name__ == "__main__":
    cli()
