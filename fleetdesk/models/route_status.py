from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from fleetdesk.models.base import Base


class RouteStatus(Base):
    __tablename__ = "route_statuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    color = Column(String(7), nullable=False)
    # At most one default; kept by clearing every row before setting one.
    is_default = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
