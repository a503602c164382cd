"""
Entity store used by the scheduling service.

The validation rules are written against the query contract in
``EntityStore``; ``SqlAlchemyEntityStore`` fulfils it over a SQLAlchemy
session.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from clinic_scheduling.models.appointment import Appointment
from clinic_scheduling.models.doctor import Doctor
from clinic_scheduling.models.room import Room


@dataclass(frozen=True)
class AppointmentCandidate:
    """Appointment values proposed for a create or an update, not yet stored."""
    patient_name: str
    scheduled_time: datetime
    doctor_id: int
    room_id: int


class EntityStore(ABC):
    """Query and write contract the scheduling rules depend on."""

    @abstractmethod
    def find_by_room_and_time(self, room_id: int, scheduled_time: datetime) -> list[Appointment]:
        """Appointments in ``room_id`` at exactly ``scheduled_time``."""

    @abstractmethod
    def find_by_doctor_and_time(self, doctor_id: int, scheduled_time: datetime) -> list[Appointment]:
        """Appointments for ``doctor_id`` at exactly ``scheduled_time``."""

    @abstractmethod
    def find_by_patient_in_range(self, patient_name: str, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments for ``patient_name`` with ``start <= time <= end``."""

    @abstractmethod
    def find_by_doctor_in_range(self, doctor_id: int, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments for ``doctor_id`` with ``start <= time < end``, ascending by time."""

    @abstractmethod
    def get_appointment(self, appointment_id: int) -> Appointment | None:
        pass

    @abstractmethod
    def get_doctor(self, doctor_id: int) -> Doctor | None:
        pass

    @abstractmethod
    def get_room(self, room_id: int) -> Room | None:
        pass

    @abstractmethod
    def add_appointment(self, candidate: AppointmentCandidate) -> Appointment:
        pass

    @abstractmethod
    def replace_appointment(self, appointment: Appointment, candidate: AppointmentCandidate) -> Appointment:
        pass

    @abstractmethod
    def delete_appointment(self, appointment: Appointment) -> None:
        pass

    @abstractmethod
    def list_appointments(self) -> list[Appointment]:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass


class SqlAlchemyEntityStore(EntityStore):
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_room_and_time(self, room_id: int, scheduled_time: datetime) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.room_id == room_id,
            Appointment.scheduled_time == scheduled_time,
        ).all()

    def find_by_doctor_and_time(self, doctor_id: int, scheduled_time: datetime) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.scheduled_time == scheduled_time,
        ).all()

    def find_by_patient_in_range(self, patient_name: str, start: datetime, end: datetime) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.patient_name == patient_name,
            Appointment.scheduled_time >= start,
            Appointment.scheduled_time <= end,
        ).all()

    def find_by_doctor_in_range(self, doctor_id: int, start: datetime, end: datetime) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.scheduled_time >= start,
            Appointment.scheduled_time < end,
        ).order_by(Appointment.scheduled_time.asc(), Appointment.id.asc()).all()

    def get_appointment(self, appointment_id: int) -> Appointment | None:
        return self.db.get(Appointment, appointment_id)

    def get_doctor(self, doctor_id: int) -> Doctor | None:
        return self.db.get(Doctor, doctor_id)

    def get_room(self, room_id: int) -> Room | None:
        return self.db.get(Room, room_id)

    def add_appointment(self, candidate: AppointmentCandidate) -> Appointment:
        appointment = Appointment(
            patient_name=candidate.patient_name,
            scheduled_time=candidate.scheduled_time,
            doctor_id=candidate.doctor_id,
            room_id=candidate.room_id,
        )
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def replace_appointment(self, appointment: Appointment, candidate: AppointmentCandidate) -> Appointment:
        appointment.patient_name = candidate.patient_name
        appointment.scheduled_time = candidate.scheduled_time
        appointment.doctor_id = candidate.doctor_id
        appointment.room_id = candidate.room_id
        self.db.flush()
        return appointment

    def delete_appointment(self, appointment: Appointment) -> None:
        self.db.delete(appointment)
        self.db.flush()

    def list_appointments(self) -> list[Appointment]:
        return self.db.query(Appointment).order_by(
            Appointment.scheduled_time.asc(),
            Appointment.id.asc(),
        ).all()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
