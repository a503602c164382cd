"""
Scheduling service for appointments.

Create, update and delete run check-then-write inside one transaction on
the store; any rejection rolls the transaction back so the store is left
as it was. Within a process the writes are also serialized by
``_write_lock`` when ``SERIALIZE_WRITES`` is on. Across processes, two
concurrent bookings for the same slot can both pass the checks unless the
database runs with serializable isolation (``DATABASE_ISOLATION_LEVEL``).
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager, nullcontext
from datetime import date, datetime
from threading import Lock

from clinic_scheduling.core import config
from clinic_scheduling.models.appointment import Appointment
from clinic_scheduling.services.conflicts import day_window, find_conflict
from clinic_scheduling.services.errors import SchedulingError, SchedulingErrorKind
from clinic_scheduling.services.store import AppointmentCandidate, EntityStore

logger = logging.getLogger(__name__)

_write_lock = Lock()


class SchedulingService:
    def __init__(self, store: EntityStore, now: Callable[[], datetime] = datetime.now) -> None:
        self.store = store
        self.now = now

    @contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        with _write_lock if config.SERIALIZE_WRITES else nullcontext():
            try:
                yield
                self.store.commit()
            except Exception:
                self.store.rollback()
                raise

    def _require_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)
        if appointment is None:
            raise SchedulingError(SchedulingErrorKind.APPOINTMENT_NOT_FOUND, 'Appointment not found.')
        return appointment

    def _require_upcoming(self, appointment: Appointment, action: str) -> None:
        if appointment.scheduled_time < self.now():
            raise SchedulingError(
                SchedulingErrorKind.PAST_APPOINTMENT,
                f'Cannot {action} an appointment that has already taken place.',
            )

    def _require_references(self, candidate: AppointmentCandidate) -> None:
        if self.store.get_doctor(candidate.doctor_id) is None:
            raise SchedulingError(SchedulingErrorKind.DOCTOR_NOT_FOUND, 'Doctor not found.')
        if self.store.get_room(candidate.room_id) is None:
            raise SchedulingError(SchedulingErrorKind.ROOM_NOT_FOUND, 'Room not found.')

    def _validate(self, candidate: AppointmentCandidate, exclude_id: int | None = None) -> None:
        self._require_references(candidate)
        conflict = find_conflict(self.store, candidate, exclude_id=exclude_id)
        if conflict is not None:
            raise SchedulingError.from_conflict(conflict)

    def create(self, candidate: AppointmentCandidate) -> Appointment:
        try:
            with self._unit_of_work():
                self._validate(candidate)
                appointment = self.store.add_appointment(candidate)
        except SchedulingError as exc:
            logger.warning('Rejected appointment for doctor %s at %s: %s', candidate.doctor_id, candidate.scheduled_time, exc.kind.value)
            raise

        logger.info('Booked appointment %s for doctor %s in room %s at %s', appointment.id, candidate.doctor_id, candidate.room_id, candidate.scheduled_time)
        return appointment

    def update(self, appointment_id: int, candidate: AppointmentCandidate) -> Appointment:
        """Replace every field of an upcoming appointment with ``candidate``.

        The appointment under update is left out of the conflict checks, so
        resubmitting it unchanged is accepted.
        """
        try:
            with self._unit_of_work():
                appointment = self._require_appointment(appointment_id)
                self._require_upcoming(appointment, 'edit')
                self._validate(candidate, exclude_id=appointment_id)
                appointment = self.store.replace_appointment(appointment, candidate)
        except SchedulingError as exc:
            logger.warning('Rejected update of appointment %s: %s', appointment_id, exc.kind.value)
            raise

        logger.info('Updated appointment %s', appointment_id)
        return appointment

    def delete(self, appointment_id: int) -> None:
        try:
            with self._unit_of_work():
                appointment = self._require_appointment(appointment_id)
                self._require_upcoming(appointment, 'cancel')
                self.store.delete_appointment(appointment)
        except SchedulingError as exc:
            logger.warning('Rejected cancellation of appointment %s: %s', appointment_id, exc.kind.value)
            raise

        logger.info('Cancelled appointment %s', appointment_id)

    def list_by_doctor_and_date(self, doctor_id: int, day: date) -> list[Appointment]:
        """Appointments for ``doctor_id`` on ``day``, ascending by time."""
        if self.store.get_doctor(doctor_id) is None:
            raise SchedulingError(SchedulingErrorKind.DOCTOR_NOT_FOUND, 'Doctor not found.')

        start, end = day_window(day)
        return self.store.find_by_doctor_in_range(doctor_id, start, end)

    def list_all(self) -> list[Appointment]:
        return self.store.list_appointments()
