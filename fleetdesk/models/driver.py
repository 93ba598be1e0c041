from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from fleetdesk.models.base import Base


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    count = Column(Integer, nullable=False, default=0)  # board position
    percentage = Column(Numeric(5, 2), nullable=False, default=0)  # commission on sold-for loads
    dispatcher_id = Column(Integer, ForeignKey("dispatchers.id", ondelete="SET NULL"), nullable=True)
    truck = Column(String, nullable=True)
    trailer = Column(String, nullable=True)
    emergency_contact_name = Column(String, nullable=True)
    emergency_contact_phone = Column(String, nullable=True)
    category = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    dispatcher = relationship("Dispatcher", back_populates="drivers", lazy="selectin")
    routes = relationship("Route", back_populates="driver")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def dispatcher_name(self):
        return self.dispatcher.full_name if self.dispatcher else None
