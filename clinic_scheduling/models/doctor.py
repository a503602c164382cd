"""Doctor model definitions."""

from sqlalchemy import Column, Integer, String
from clinic_scheduling.database import Base


class Doctor(Base):
    """Represents a doctor who can be booked for appointments."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    specialty = Column(String)
