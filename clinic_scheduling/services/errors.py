"""Failure kinds reported by the scheduling service."""

from dataclasses import dataclass
from enum import Enum


class SchedulingErrorKind(str, Enum):
    ROOM_CONFLICT = 'room_conflict'
    DOCTOR_CONFLICT = 'doctor_conflict'
    PATIENT_CONFLICT = 'patient_conflict'
    QUOTA_EXCEEDED = 'quota_exceeded'
    APPOINTMENT_NOT_FOUND = 'appointment_not_found'
    DOCTOR_NOT_FOUND = 'doctor_not_found'
    ROOM_NOT_FOUND = 'room_not_found'
    PAST_APPOINTMENT = 'past_appointment'


CONFLICT_KINDS = frozenset({
    SchedulingErrorKind.ROOM_CONFLICT,
    SchedulingErrorKind.DOCTOR_CONFLICT,
    SchedulingErrorKind.PATIENT_CONFLICT,
    SchedulingErrorKind.QUOTA_EXCEEDED,
})

NOT_FOUND_KINDS = frozenset({
    SchedulingErrorKind.APPOINTMENT_NOT_FOUND,
    SchedulingErrorKind.DOCTOR_NOT_FOUND,
    SchedulingErrorKind.ROOM_NOT_FOUND,
})


@dataclass(frozen=True)
class SchedulingConflict:
    """Result of a failed conflict check."""
    kind: SchedulingErrorKind
    message: str
    # id of the stored appointment that triggered the conflict, if any
    appointment_id: int | None = None


class SchedulingError(Exception):
    """Raised by the scheduling service when an operation is rejected.

    Carries exactly one failure kind; the store is left unchanged.
    """

    def __init__(self, kind: SchedulingErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    @classmethod
    def from_conflict(cls, conflict: SchedulingConflict) -> 'SchedulingError':
        return cls(conflict.kind, conflict.message)

    def to_dict(self) -> dict:
        return {'kind': self.kind.value, 'message': self.message}
