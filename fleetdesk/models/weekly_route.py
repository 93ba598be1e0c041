from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from fleetdesk.models.base import Base


class WeeklyRoute(Base):
    """A driver's schedule for one calendar week."""
    __tablename__ = "weekly_routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False)
    division_id = Column(Integer, ForeignKey("divisions.id", ondelete="SET NULL"), nullable=True)
    dispatcher_id = Column(Integer, ForeignKey("dispatchers.id", ondelete="SET NULL"), nullable=True)
    week_start_date = Column(Date, nullable=False)
    week_end_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="active")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    driver = relationship("Driver", lazy="selectin")
    division = relationship("Division", lazy="selectin")
    dispatcher = relationship("Dispatcher", lazy="selectin")
    details = relationship(
        "WeeklyRouteDetail",
        back_populates="weekly_route",
        cascade="all, delete-orphan",
        order_by="WeeklyRouteDetail.day_of_week, WeeklyRouteDetail.sequence_number",
    )

    __table_args__ = (
        Index("idx_weekly_routes_week", "week_start_date", "week_end_date"),
        Index("idx_weekly_routes_driver", "driver_id"),
    )

    @property
    def driver_name(self):
        return self.driver.full_name if self.driver else None

    @property
    def division_name(self):
        return self.division.name if self.division else None

    @property
    def dispatcher_name(self):
        return self.dispatcher.full_name if self.dispatcher else None


class WeeklyRouteDetail(Base):
    """Places a route in a (day_of_week, sequence_number) slot of a weekly route."""
    __tablename__ = "weekly_route_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    weekly_route_id = Column(Integer, ForeignKey("weekly_routes.id", ondelete="CASCADE"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Monday
    sequence_number = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)

    weekly_route = relationship("WeeklyRoute", back_populates="details")
    route = relationship("Route", back_populates="weekly_slots")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_weekly_route_details_day"),
        Index("idx_weekly_route_details_week", "weekly_route_id", "day_of_week", "sequence_number"),
    )


class WeeklyRouteAudit(Base):
    __tablename__ = "weekly_route_audits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    weekly_route_id = Column(Integer, nullable=False)
    user_name = Column(String, nullable=True)
    action = Column(String, nullable=False)  # created, updated, route_added, route_removed
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_weekly_route_audits_week", "weekly_route_id"),
    )
