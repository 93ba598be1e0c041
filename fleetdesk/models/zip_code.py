from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String

from fleetdesk.models.base import Base


class ZipCode(Base):
    """Persisted ZIP lookup cache, keyed by the exact ZIP string."""
    __tablename__ = "zip_codes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    zip_code = Column(String(5), nullable=False, unique=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    county = Column(String, nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
