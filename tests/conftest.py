import os
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from clinic_scheduling.database import Base  # noqa: E402
from clinic_scheduling.models.appointment import Appointment  # noqa: E402
from clinic_scheduling.models.doctor import Doctor  # noqa: E402
from clinic_scheduling.models.room import Room  # noqa: E402


@pytest.fixture
def scheduling_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Doctor.__table__, Room.__table__, Appointment.__table__])

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=[Appointment.__table__, Room.__table__, Doctor.__table__])


@pytest.fixture
def clinic(scheduling_db):
    """Two doctors (d1, d2) and two rooms (r101, r102)."""
    d1 = Doctor(name='Dr. Elena Ruiz', specialty='General Medicine')
    d2 = Doctor(name='Dr. Marco Salas', specialty='Pediatrics')
    r101 = Room(room_number=101, floor=1)
    r102 = Room(room_number=102, floor=1)
    scheduling_db.add_all([d1, d2, r101, r102])
    scheduling_db.commit()

    return {'d1': d1.id, 'd2': d2.id, 'r101': r101.id, 'r102': r102.id}


@pytest.fixture
def book(scheduling_db):
    """Insert an appointment directly, bypassing the conflict checks."""
    def _book(patient_name: str, scheduled_time: datetime, doctor_id: int, room_id: int) -> Appointment:
        appointment = Appointment(
            patient_name=patient_name,
            scheduled_time=scheduled_time,
            doctor_id=doctor_id,
            room_id=room_id,
        )
        scheduling_db.add(appointment)
        scheduling_db.commit()
        scheduling_db.refresh(appointment)
        return appointment

    return _book
