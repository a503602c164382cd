from datetime import date, datetime

import pytest

from clinic_scheduling.services.conflicts import (
    check_doctor_available,
    check_doctor_daily_quota,
    check_patient_spacing,
    check_room_available,
    day_window,
    find_conflict,
)
from clinic_scheduling.services.errors import SchedulingErrorKind
from clinic_scheduling.services.store import AppointmentCandidate, SqlAlchemyEntityStore


@pytest.fixture
def store(scheduling_db):
    return SqlAlchemyEntityStore(scheduling_db)


def test_day_window_spans_midnight_to_midnight() -> None:
    assert day_window(date(2024, 6, 1)) == (datetime(2024, 6, 1, 0, 0), datetime(2024, 6, 2, 0, 0))


def test_room_check_matches_exact_time_only(store, clinic, book) -> None:
    existing = book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])

    same_time = AppointmentCandidate('Luis', datetime(2024, 6, 1, 10, 0), clinic['d2'], clinic['r101'])
    next_minute = AppointmentCandidate('Luis', datetime(2024, 6, 1, 10, 1), clinic['d2'], clinic['r101'])

    conflict = check_room_available(store, same_time)
    assert conflict.kind == SchedulingErrorKind.ROOM_CONFLICT
    assert conflict.appointment_id == existing.id
    assert check_room_available(store, next_minute) is None


def test_doctor_check_ignores_other_doctors(store, clinic, book) -> None:
    book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])

    same_doctor = AppointmentCandidate('Luis', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r102'])
    other_doctor = AppointmentCandidate('Luis', datetime(2024, 6, 1, 10, 0), clinic['d2'], clinic['r102'])

    assert check_doctor_available(store, same_doctor).kind == SchedulingErrorKind.DOCTOR_CONFLICT
    assert check_doctor_available(store, other_doctor) is None


@pytest.mark.parametrize(
    ('candidate_time', 'expected_conflict'),
    [
        (datetime(2024, 6, 1, 8, 0), True),
        (datetime(2024, 6, 1, 11, 0), True),
        (datetime(2024, 6, 1, 12, 0), True),
        (datetime(2024, 6, 1, 12, 1), False),
        (datetime(2024, 6, 1, 7, 59), False),
    ],
)
def test_patient_spacing_window_is_inclusive(
    store,
    clinic,
    book,
    candidate_time: datetime,
    expected_conflict: bool,
) -> None:
    book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])
    candidate = AppointmentCandidate('Ana', candidate_time, clinic['d2'], clinic['r102'])

    conflict = check_patient_spacing(store, candidate, spacing_hours=2)

    assert (conflict is not None) is expected_conflict


def test_patient_spacing_matches_name_exactly(store, clinic, book) -> None:
    book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])
    candidate = AppointmentCandidate('ana', datetime(2024, 6, 1, 11, 0), clinic['d2'], clinic['r102'])

    assert check_patient_spacing(store, candidate, spacing_hours=2) is None


def test_daily_quota_counts_all_rooms_within_the_day(store, clinic, book) -> None:
    rooms = [clinic['r101'], clinic['r102']]
    for hour in range(8, 16):
        book(f'Patient {hour}', datetime(2024, 6, 1, hour, 0), clinic['d1'], rooms[hour % 2])

    same_day = AppointmentCandidate('Luis', datetime(2024, 6, 1, 18, 0), clinic['d1'], clinic['r101'])
    next_day = AppointmentCandidate('Luis', datetime(2024, 6, 2, 9, 0), clinic['d1'], clinic['r101'])

    assert check_doctor_daily_quota(store, same_day, daily_quota=8).kind == SchedulingErrorKind.QUOTA_EXCEEDED
    assert check_doctor_daily_quota(store, next_day, daily_quota=8) is None


def test_daily_quota_ignores_appointment_at_next_midnight(store, clinic, book) -> None:
    for hour in range(8, 15):
        book(f'Patient {hour}', datetime(2024, 6, 1, hour, 0), clinic['d1'], clinic['r101'])
    book('Late', datetime(2024, 6, 2, 0, 0), clinic['d1'], clinic['r101'])

    candidate = AppointmentCandidate('Luis', datetime(2024, 6, 1, 18, 0), clinic['d1'], clinic['r102'])

    assert check_doctor_daily_quota(store, candidate, daily_quota=8) is None


def test_find_conflict_reports_first_failing_check(store, clinic, book) -> None:
    book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])
    candidate = AppointmentCandidate('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])

    assert find_conflict(store, candidate).kind == SchedulingErrorKind.ROOM_CONFLICT


def test_find_conflict_excludes_appointment_being_replaced(store, clinic, book) -> None:
    existing = book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])
    candidate = AppointmentCandidate('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])

    assert find_conflict(store, candidate, exclude_id=existing.id) is None


def test_find_conflict_reads_limits_from_config(store, clinic, book, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('clinic_scheduling.core.config.DOCTOR_DAILY_QUOTA', 1)
    book('Ana', datetime(2024, 6, 1, 8, 0), clinic['d1'], clinic['r101'])
    candidate = AppointmentCandidate('Luis', datetime(2024, 6, 1, 15, 0), clinic['d1'], clinic['r102'])

    assert find_conflict(store, candidate).kind == SchedulingErrorKind.QUOTA_EXCEEDED


def test_find_conflict_reads_spacing_from_config(store, clinic, book, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('clinic_scheduling.core.config.PATIENT_SPACING_HOURS', 1)
    book('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])
    candidate = AppointmentCandidate('Ana', datetime(2024, 6, 1, 11, 30), clinic['d2'], clinic['r102'])

    assert find_conflict(store, candidate) is None


def test_limit_checks_require_explicit_limits(store, clinic) -> None:
    candidate = AppointmentCandidate('Ana', datetime(2024, 6, 1, 10, 0), clinic['d1'], clinic['r101'])

    with pytest.raises(TypeError):
        check_patient_spacing(store, candidate)
    with pytest.raises(TypeError):
        check_doctor_daily_quota(store, candidate)
