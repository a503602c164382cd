"""
Conflict checks run before an appointment is created or replaced.

Each check looks up the current store state and returns a
``SchedulingConflict`` describing the first clash it finds, or ``None``.
Checks never raise and never write.

Rules, in evaluation order:
- a room holds one appointment per instant
- a doctor holds one appointment per instant
- a patient's appointments are at least ``PATIENT_SPACING_HOURS`` apart
- a doctor holds fewer than ``DOCTOR_DAILY_QUOTA`` appointments per calendar day
"""

from datetime import date, datetime, time, timedelta

from clinic_scheduling.core import config
from clinic_scheduling.models.appointment import Appointment
from clinic_scheduling.services.errors import SchedulingConflict, SchedulingErrorKind
from clinic_scheduling.services.store import AppointmentCandidate, EntityStore


def day_window(day: date) -> tuple[datetime, datetime]:
    """Half-open ``[midnight, next midnight)`` bounds for ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def _without(appointments: list[Appointment], exclude_id: int | None) -> list[Appointment]:
    if exclude_id is None:
        return appointments
    return [appointment for appointment in appointments if appointment.id != exclude_id]


def check_room_available(
    store: EntityStore,
    candidate: AppointmentCandidate,
    exclude_id: int | None = None,
) -> SchedulingConflict | None:
    clashes = _without(store.find_by_room_and_time(candidate.room_id, candidate.scheduled_time), exclude_id)
    if not clashes:
        return None
    return SchedulingConflict(
        kind=SchedulingErrorKind.ROOM_CONFLICT,
        message='The room is already booked at the requested time.',
        appointment_id=clashes[0].id,
    )


def check_doctor_available(
    store: EntityStore,
    candidate: AppointmentCandidate,
    exclude_id: int | None = None,
) -> SchedulingConflict | None:
    clashes = _without(store.find_by_doctor_and_time(candidate.doctor_id, candidate.scheduled_time), exclude_id)
    if not clashes:
        return None
    return SchedulingConflict(
        kind=SchedulingErrorKind.DOCTOR_CONFLICT,
        message='The doctor already has an appointment at the requested time.',
        appointment_id=clashes[0].id,
    )


def check_patient_spacing(
    store: EntityStore,
    candidate: AppointmentCandidate,
    exclude_id: int | None = None,
    *,
    spacing_hours: int,
) -> SchedulingConflict | None:
    spacing = timedelta(hours=spacing_hours)
    clashes = _without(
        store.find_by_patient_in_range(
            candidate.patient_name,
            candidate.scheduled_time - spacing,
            candidate.scheduled_time + spacing,
        ),
        exclude_id,
    )
    if not clashes:
        return None
    return SchedulingConflict(
        kind=SchedulingErrorKind.PATIENT_CONFLICT,
        message=f'The patient already has an appointment within {spacing_hours} hours of the requested time.',
        appointment_id=clashes[0].id,
    )


def check_doctor_daily_quota(
    store: EntityStore,
    candidate: AppointmentCandidate,
    exclude_id: int | None = None,
    *,
    daily_quota: int,
) -> SchedulingConflict | None:
    start, end = day_window(candidate.scheduled_time.date())
    booked = _without(store.find_by_doctor_in_range(candidate.doctor_id, start, end), exclude_id)
    if len(booked) < daily_quota:
        return None
    return SchedulingConflict(
        kind=SchedulingErrorKind.QUOTA_EXCEEDED,
        message=f'The doctor already has {daily_quota} appointments scheduled for this day.',
    )


def find_conflict(
    store: EntityStore,
    candidate: AppointmentCandidate,
    exclude_id: int | None = None,
) -> SchedulingConflict | None:
    """Run every check in order and return the first conflict, if any.

    ``exclude_id`` names a stored appointment that is being replaced by
    ``candidate`` and must not count against it.
    """
    checks = (
        lambda: check_room_available(store, candidate, exclude_id),
        lambda: check_doctor_available(store, candidate, exclude_id),
        lambda: check_patient_spacing(store, candidate, exclude_id, spacing_hours=config.PATIENT_SPACING_HOURS),
        lambda: check_doctor_daily_quota(store, candidate, exclude_id, daily_quota=config.DOCTOR_DAILY_QUOTA),
    )
    for check in checks:
        conflict = check()
        if conflict is not None:
            return conflict
    return None
