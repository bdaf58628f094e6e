"""
Tests for Appointment Service.

Coverage:
- Conflict detection (half-open windows, cancelled policy)
- Booking validation order and persisted fields
- Status overwrite within the closed set
- Reschedule and hard delete
"""

import pytest
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import uuid4

from agenda.core.config import settings
from agenda.core.exceptions import ConflictError, NotFoundError, ValidationError
from agenda.db.enums import AppointmentStatus
from agenda.db.models import Appointment, WorkingInterval

MONDAY = date(2030, 1, 7)


def _at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


def _insert(db, employee, service, start, end, status=AppointmentStatus.SCHEDULED.value):
    appt = Appointment(
        client_name="Ana Ruiz",
        client_document="1001",
        client_phone="3001234567",
        employee_id=employee.id,
        service_id=service.id,
        scheduled_start=start,
        scheduled_end=end,
        status=status,
        total_cost=service.cost,
        reminder_sent=False,
    )
    db.add(appt)
    db.commit()
    db.refresh(appt)
    return appt


def _book(db, employee, service, start, **kwargs):
    from agenda.services.appointment_service import create_appointment

    return create_appointment(
        db,
        client_name=kwargs.pop("client_name", "Ana Ruiz"),
        client_document=kwargs.pop("client_document", "1001"),
        client_phone=kwargs.pop("client_phone", "3001234567"),
        employee_id=employee.id,
        service_id=service.id,
        scheduled_start=start,
        **kwargs,
    )


# =============================================================================
# Conflict Detection
# =============================================================================

class TestConflictDetection:
    """Overlap rules for the same employee."""

    def test_touching_windows_do_not_conflict(self, db, employee, service):
        from agenda.services.appointment_service import has_conflict

        _insert(db, employee, service, _at(10, 30), _at(11, 0))

        assert has_conflict(db, employee.id, _at(10, 0), _at(10, 30)) is False
        assert has_conflict(db, employee.id, _at(11, 0), _at(11, 30)) is False

    def test_one_minute_overlap_conflicts(self, db, employee, service):
        from agenda.services.appointment_service import has_conflict

        _insert(db, employee, service, _at(10, 30), _at(11, 0))

        assert has_conflict(db, employee.id, _at(10, 0), _at(10, 31)) is True

    def test_containing_window_conflicts(self, db, employee, service):
        from agenda.services.appointment_service import has_conflict

        _insert(db, employee, service, _at(10, 30), _at(11, 0))

        assert has_conflict(db, employee.id, _at(10, 0), _at(12, 0)) is True
        assert has_conflict(db, employee.id, _at(10, 40), _at(10, 50)) is True

    def test_other_employee_is_ignored(self, db, employee, service):
        from agenda.services.appointment_service import has_conflict
        from agenda.services.catalog_service import create_employee

        other = create_employee(db, "Pedro Díaz")
        _insert(db, other, service, _at(10, 0), _at(11, 0))

        assert has_conflict(db, employee.id, _at(10, 0), _at(11, 0)) is False

    def test_exclude_appointment_id(self, db, employee, service):
        from agenda.services.appointment_service import has_conflict

        appt = _insert(db, employee, service, _at(10, 0), _at(10, 30))

        assert has_conflict(
            db, employee.id, _at(10, 0), _at(10, 30), exclude_appointment_id=appt.id
        ) is False

    def test_cancelled_frees_slot_by_default(self, db, employee, service, monkeypatch):
        from agenda.services.appointment_service import has_conflict

        monkeypatch.setattr(settings, "CANCELLED_FREES_SLOT", True)
        _insert(db, employee, service, _at(10, 0), _at(10, 30), status="cancelled")

        assert has_conflict(db, employee.id, _at(10, 0), _at(10, 30)) is False

    def test_cancelled_blocks_when_policy_disabled(self, db, employee, service, monkeypatch):
        from agenda.services.appointment_service import has_conflict

        monkeypatch.setattr(settings, "CANCELLED_FREES_SLOT", False)
        _insert(db, employee, service, _at(10, 0), _at(10, 30), status="cancelled")

        assert has_conflict(db, employee.id, _at(10, 0), _at(10, 30)) is True

    def test_explicit_include_cancelled_overrides_setting(self, db, employee, service, monkeypatch):
        from agenda.services.appointment_service import has_conflict

        monkeypatch.setattr(settings, "CANCELLED_FREES_SLOT", True)
        _insert(db, employee, service, _at(10, 0), _at(10, 30), status="cancelled")

        assert has_conflict(
            db, employee.id, _at(10, 0), _at(10, 30), include_cancelled=True
        ) is True

    def test_fulfilled_and_no_show_still_block(self, db, employee, service):
        from agenda.services.appointment_service import has_conflict

        _insert(db, employee, service, _at(9, 0), _at(9, 30), status="fulfilled")
        _insert(db, employee, service, _at(11, 0), _at(11, 30), status="no_show")

        assert has_conflict(db, employee.id, _at(9, 0), _at(9, 30)) is True
        assert has_conflict(db, employee.id, _at(11, 0), _at(11, 30)) is True


# =============================================================================
# Booking
# =============================================================================

class TestCreateAppointment:
    """Booking workflow."""

    def test_creates_with_snapshot_fields(self, db, employee, service, monday_hours):
        appt = _book(db, employee, service, _at(9, 0))

        assert appt.id is not None
        assert appt.scheduled_end - appt.scheduled_start == timedelta(minutes=30)
        assert appt.status == "scheduled"
        assert appt.total_cost == Decimal("25.00")
        assert appt.reminder_sent is False
        assert appt.created_at is not None

    def test_end_is_start_plus_duration(self, db, employee, long_service, monday_hours):
        appt = _book(db, employee, long_service, _at(8, 30))

        assert appt.scheduled_end == _at(9, 30)

    def test_cost_snapshot_survives_price_change(self, db, employee, service, monday_hours):
        appt = _book(db, employee, service, _at(9, 0))

        service.cost = Decimal("40.00")
        db.commit()
        db.refresh(appt)

        assert appt.total_cost == Decimal("25.00")

    def test_missing_start_fails_first(self, db):
        from agenda.services.appointment_service import create_appointment

        with pytest.raises(ValidationError, match="required"):
            create_appointment(
                db,
                client_name="Ana",
                client_document="1",
                client_phone="2",
                employee_id=uuid4(),
                service_id=uuid4(),
                scheduled_start=None,
            )

    def test_unknown_employee_checked_before_service(self, db):
        from agenda.services.appointment_service import create_appointment

        with pytest.raises(NotFoundError, match="Employee"):
            create_appointment(
                db,
                client_name="Ana",
                client_document="1",
                client_phone="2",
                employee_id=uuid4(),
                service_id=uuid4(),
                scheduled_start=_at(9, 0),
            )

    def test_unknown_service(self, db, employee):
        from agenda.services.appointment_service import create_appointment

        with pytest.raises(NotFoundError, match="Service"):
            create_appointment(
                db,
                client_name="Ana",
                client_document="1",
                client_phone="2",
                employee_id=employee.id,
                service_id=uuid4(),
                scheduled_start=_at(9, 0),
            )

    def test_overrunning_working_hours_is_rejected(self, db, employee, service, monday_hours):
        with pytest.raises(ValidationError, match="does not work"):
            _book(db, employee, service, _at(11, 45))

    def test_ending_exactly_at_close_is_allowed(self, db, employee, service, monday_hours):
        appt = _book(db, employee, service, _at(11, 30))

        assert appt.scheduled_end == _at(12, 0)

    def test_day_without_hours_is_rejected(self, db, employee, service, monday_hours):
        with pytest.raises(ValidationError):
            _book(db, employee, service, _at(9, 0, day=MONDAY + timedelta(days=1)))

    def test_inactive_interval_does_not_count(self, db, employee, service, monday_hours):
        monday_hours.is_active = False
        db.commit()

        with pytest.raises(ValidationError):
            _book(db, employee, service, _at(9, 0))

    def test_must_fit_inside_a_single_interval(self, db, employee, service):
        db.add_all([
            WorkingInterval(employee_id=employee.id, day_of_week=1,
                            start_time=time(8, 0), end_time=time(10, 0), is_active=True),
            WorkingInterval(employee_id=employee.id, day_of_week=1,
                            start_time=time(10, 0), end_time=time(12, 0), is_active=True),
        ])
        db.commit()

        with pytest.raises(ValidationError):
            _book(db, employee, service, _at(9, 45))

    def test_conflict_checked_before_working_hours(self, db, employee, service, monday_hours):
        _insert(db, employee, service, _at(11, 45), _at(12, 15))

        with pytest.raises(ConflictError):
            _book(db, employee, service, _at(11, 45))

    def test_overlap_is_rejected(self, db, employee, service, monday_hours):
        _book(db, employee, service, _at(9, 0))

        with pytest.raises(ConflictError):
            _book(db, employee, service, _at(9, 15))

    def test_back_to_back_is_allowed(self, db, employee, service, monday_hours):
        _book(db, employee, service, _at(9, 0))
        second = _book(db, employee, service, _at(9, 30))

        assert second.scheduled_start == _at(9, 30)

    def test_rebook_over_cancelled(self, db, employee, service, monday_hours, monkeypatch):
        monkeypatch.setattr(settings, "CANCELLED_FREES_SLOT", True)
        _insert(db, employee, service, _at(9, 0), _at(9, 30), status="cancelled")

        appt = _book(db, employee, service, _at(9, 0))

        assert appt.status == "scheduled"

    def test_rebook_over_cancelled_blocked_when_policy_disabled(
        self, db, employee, service, monday_hours, monkeypatch
    ):
        monkeypatch.setattr(settings, "CANCELLED_FREES_SLOT", False)
        _insert(db, employee, service, _at(9, 0), _at(9, 30), status="cancelled")

        with pytest.raises(ConflictError):
            _book(db, employee, service, _at(9, 0))

    def test_initial_status_is_honoured(self, db, employee, service, monday_hours):
        appt = _book(db, employee, service, _at(9, 0), initial_status=AppointmentStatus.FULFILLED)

        assert appt.status == "fulfilled"

    def test_unknown_initial_status_is_rejected(self, db, employee, service, monday_hours):
        with pytest.raises(ValidationError, match="Invalid status"):
            _book(db, employee, service, _at(9, 0), initial_status="pending")

        assert db.query(Appointment).count() == 0

    def test_unknown_employee_reported_before_unknown_status(self, db, service, monday_hours):
        from agenda.services.appointment_service import create_appointment

        with pytest.raises(NotFoundError):
            create_appointment(
                db,
                client_name="Ana Ruiz",
                client_document="1001",
                client_phone="3001234567",
                employee_id=uuid4(),
                service_id=service.id,
                scheduled_start=_at(9, 0),
                initial_status="pending",
            )

    def test_failed_booking_writes_nothing(self, db, employee, service, monday_hours):
        with pytest.raises(ValidationError):
            _book(db, employee, service, _at(11, 45))

        assert db.query(Appointment).count() == 0


# =============================================================================
# End-to-end booking
# =============================================================================

def test_sixty_minute_booking_blocks_overlap_then_allows_next_hour(
    db, employee, long_service, monday_hours
):
    first = _book(db, employee, long_service, _at(9, 0))
    assert first.scheduled_end == _at(10, 0)

    with pytest.raises(ConflictError):
        _book(db, employee, long_service, _at(9, 30))

    second = _book(db, employee, long_service, _at(10, 0))
    assert second.scheduled_end == _at(11, 0)


# =============================================================================
# Lifecycle
# =============================================================================

class TestStatus:
    """Status overwrite."""

    @pytest.mark.parametrize("new_status", ["fulfilled", "cancelled", "no_show", "scheduled"])
    def test_any_known_status_is_accepted(self, db, employee, service, new_status):
        from agenda.services.appointment_service import set_status

        appt = _insert(db, employee, service, _at(9, 0), _at(9, 30))
        updated = set_status(db, appt.id, new_status)

        assert updated.status == new_status

    def test_terminal_status_can_be_overwritten(self, db, employee, service):
        from agenda.services.appointment_service import set_status

        appt = _insert(db, employee, service, _at(9, 0), _at(9, 30), status="cancelled")
        updated = set_status(db, appt.id, AppointmentStatus.SCHEDULED)

        assert updated.status == "scheduled"

    def test_unknown_status_is_rejected(self, db, employee, service):
        from agenda.services.appointment_service import set_status

        appt = _insert(db, employee, service, _at(9, 0), _at(9, 30))

        with pytest.raises(ValidationError):
            set_status(db, appt.id, "done")
        db.refresh(appt)
        assert appt.status == "scheduled"

    def test_missing_appointment(self, db):
        from agenda.services.appointment_service import set_status

        with pytest.raises(NotFoundError):
            set_status(db, uuid4(), "fulfilled")


class TestDelete:
    """Administrative hard delete."""

    def test_delete_removes_row(self, db, employee, service):
        from agenda.services.appointment_service import delete_appointment, get_appointment

        appt = _insert(db, employee, service, _at(9, 0), _at(9, 30), status="fulfilled")
        delete_appointment(db, appt.id)

        assert get_appointment(db, appt.id) is None

    def test_delete_missing(self, db):
        from agenda.services.appointment_service import delete_appointment

        with pytest.raises(NotFoundError):
            delete_appointment(db, uuid4())


class TestReschedule:
    """Moving an appointment."""

    def test_end_recomputed_from_duration(self, db, employee, long_service, monday_hours):
        from agenda.services.appointment_service import reschedule_appointment

        appt = _book(db, employee, long_service, _at(8, 0))
        moved = reschedule_appointment(db, appt.id, _at(10, 30))

        assert moved.scheduled_start == _at(10, 30)
        assert moved.scheduled_end == _at(11, 30)

    def test_overlapping_own_window_is_allowed(self, db, employee, long_service, monday_hours):
        from agenda.services.appointment_service import reschedule_appointment

        appt = _book(db, employee, long_service, _at(9, 0))
        moved = reschedule_appointment(db, appt.id, _at(9, 30))

        assert moved.scheduled_end == _at(10, 30)

    def test_conflict_with_other_appointment(self, db, employee, service, monday_hours):
        from agenda.services.appointment_service import reschedule_appointment

        appt = _book(db, employee, service, _at(9, 0))
        _book(db, employee, service, _at(10, 0))

        with pytest.raises(ConflictError):
            reschedule_appointment(db, appt.id, _at(10, 0))

    def test_outside_hours(self, db, employee, service, monday_hours):
        from agenda.services.appointment_service import reschedule_appointment

        appt = _book(db, employee, service, _at(9, 0))

        with pytest.raises(ValidationError):
            reschedule_appointment(db, appt.id, _at(12, 0))

    def test_only_scheduled_can_move(self, db, employee, service, monday_hours):
        from agenda.services.appointment_service import reschedule_appointment

        appt = _insert(db, employee, service, _at(9, 0), _at(9, 30), status="cancelled")

        with pytest.raises(ConflictError):
            reschedule_appointment(db, appt.id, _at(10, 0))

    def test_move_resets_reminder_flag(self, db, employee, service, monday_hours):
        from agenda.services.appointment_service import reschedule_appointment

        appt = _book(db, employee, service, _at(9, 0))
        appt.reminder_sent = True
        db.commit()

        moved = reschedule_appointment(db, appt.id, _at(11, 0))

        assert moved.reminder_sent is False


class TestListing:
    """Queries."""

    def test_list_for_employee_on_date(self, db, employee, service):
        from agenda.services.appointment_service import list_for_employee_on

        _insert(db, employee, service, _at(11, 0), _at(11, 30))
        _insert(db, employee, service, _at(9, 0), _at(9, 30))
        _insert(db, employee, service, _at(9, 0, day=MONDAY + timedelta(days=1)),
                _at(9, 30, day=MONDAY + timedelta(days=1)))

        appts = list_for_employee_on(db, employee.id, MONDAY)

        assert [a.scheduled_start for a in appts] == [_at(9, 0), _at(11, 0)]

    def test_list_by_status(self, db, employee, service):
        from agenda.services.appointment_service import list_appointments

        _insert(db, employee, service, _at(9, 0), _at(9, 30))
        _insert(db, employee, service, _at(10, 0), _at(10, 30), status="cancelled")

        assert len(list_appointments(db, status="cancelled")) == 1
        assert len(list_appointments(db)) == 2
