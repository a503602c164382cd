from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_scheduling.database import SessionLocal, ensure_appointment_schema
from clinic_scheduling.models.appointment import Appointment
from clinic_scheduling.services.errors import CONFLICT_KINDS, NOT_FOUND_KINDS, SchedulingError
from clinic_scheduling.services.scheduling import SchedulingService
from clinic_scheduling.services.store import AppointmentCandidate, SqlAlchemyEntityStore

router = APIRouter(tags=['appointments'])

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL.'


class AppointmentRequest(BaseModel):
    patient_name: str
    scheduled_time: datetime
    doctor_id: int = Field(gt=0)
    room_id: int = Field(gt=0)

    @field_validator('patient_name')
    @classmethod
    def validate_patient_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Patient name is required.')
        return normalized

    @field_validator('scheduled_time')
    @classmethod
    def validate_scheduled_time(cls, value: datetime) -> datetime:
        # stored as naive local wall-clock time
        if value.tzinfo is not None:
            raise ValueError('Scheduled time must not carry a UTC offset.')
        return value.replace(microsecond=0)

    def to_candidate(self) -> AppointmentCandidate:
        return AppointmentCandidate(
            patient_name=self.patient_name,
            scheduled_time=self.scheduled_time,
            doctor_id=self.doctor_id,
            room_id=self.room_id,
        )


class AppointmentResponse(BaseModel):
    id: int
    patient_name: str
    scheduled_time: datetime
    doctor_id: int
    room_id: int

    class Config:
        from_attributes = True


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def build_service(db: Session) -> SchedulingService:
    return SchedulingService(SqlAlchemyEntityStore(db))


def scheduling_error_status(exc: SchedulingError) -> int:
    if exc.kind in CONFLICT_KINDS:
        return status.HTTP_409_CONFLICT
    if exc.kind in NOT_FOUND_KINDS:
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


def to_http_exception(exc: SchedulingError) -> HTTPException:
    return HTTPException(status_code=scheduling_error_status(exc), detail=exc.to_dict())


def to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse.model_validate(appointment)


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: AppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointment = build_service(db).create(data.to_candidate())
        return to_response(appointment)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.put('/{appointment_id}', response_model=AppointmentResponse)
def update_appointment(appointment_id: int, data: AppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointment = build_service(db).update(appointment_id, data.to_candidate())
        return to_response(appointment)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/{appointment_id}', status_code=status.HTTP_204_NO_CONTENT)
def cancel_appointment(appointment_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        build_service(db).delete(appointment_id)
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/doctor/{doctor_id}', response_model=list[AppointmentResponse])
def list_doctor_appointments(
    doctor_id: int,
    day: date = Query(..., alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        appointments = build_service(db).list_by_doctor_and_date(doctor_id, day)
        return [to_response(appointment) for appointment in appointments]
    except SchedulingError as exc:
        raise to_http_exception(exc) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return [to_response(appointment) for appointment in build_service(db).list_all()]
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
