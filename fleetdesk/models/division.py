from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from fleetdesk.models.base import Base


class Division(Base):
    """Booking entity (own MC/DOT numbers) a route is dispatched under."""
    __tablename__ = "divisions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    mc = Column(String, nullable=True)
    dot = Column(String, nullable=True)
    address = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
