"""Room model definitions."""

from sqlalchemy import Column, Integer
from clinic_scheduling.database import Base


class Room(Base):
    """Represents an examination room."""
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(Integer, nullable=False)
    floor = Column(Integer)
