"""Appointment model definitions."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, String
from clinic_scheduling.database import Base


class Appointment(Base):
    """Represents a booked appointment for one patient, doctor and room."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    patient_name = Column(String, nullable=False)
    scheduled_time = Column(DateTime, nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
