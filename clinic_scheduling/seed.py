"""Insert the default doctors and rooms when their tables are empty.

Usage:
    python -m clinic_scheduling.seed
"""
import logging

from sqlalchemy.orm import Session

from clinic_scheduling.database import Base, SessionLocal, engine
from clinic_scheduling.models.appointment import Appointment  # noqa: F401
from clinic_scheduling.models.doctor import Doctor
from clinic_scheduling.models.room import Room

logger = logging.getLogger(__name__)

DEFAULT_DOCTORS = [
    ('Dr. Elena Ruiz', 'General Medicine'),
    ('Dr. Marco Salas', 'Pediatrics'),
    ('Dr. Sofia Medina', 'Cardiology'),
]

DEFAULT_ROOMS = [
    (101, 1),
    (102, 1),
    (201, 2),
]


def seed_reference_data(db: Session) -> tuple[int, int]:
    """Return how many doctors and rooms were inserted."""
    doctors_added = 0
    rooms_added = 0

    if db.query(Doctor).count() == 0:
        db.add_all(Doctor(name=name, specialty=specialty) for name, specialty in DEFAULT_DOCTORS)
        doctors_added = len(DEFAULT_DOCTORS)

    if db.query(Room).count() == 0:
        db.add_all(Room(room_number=number, floor=floor) for number, floor in DEFAULT_ROOMS)
        rooms_added = len(DEFAULT_ROOMS)

    db.commit()
    return doctors_added, rooms_added


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        doctors_added, rooms_added = seed_reference_data(db)
    logger.info('Seeded %s doctors and %s rooms', doctors_added, rooms_added)


if __name__ == "__main__":
    main()
