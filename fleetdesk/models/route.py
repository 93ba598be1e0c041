from datetime import datetime

from sqlalchemy import (
    JSON, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
)
from sqlalchemy.orm import relationship

from fleetdesk.core.constants import MILEAGE_MANUAL
from fleetdesk.models.base import Base


class Route(Base):
    """One dispatched load for one driver on one date."""
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False)
    division_id = Column(Integer, ForeignKey("divisions.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False)

    pickup_zip = Column(String(5), nullable=False)
    pickup_city = Column(String, nullable=True)
    pickup_state = Column(String, nullable=True)
    pickup_county = Column(String, nullable=True)
    delivery_zip = Column(String(5), nullable=False)
    delivery_city = Column(String, nullable=True)
    delivery_state = Column(String, nullable=True)
    delivery_county = Column(String, nullable=True)

    mileage = Column(Integer, nullable=True)
    mileage_source = Column(String, nullable=True)  # manual, same_state, ..., fallback
    rate = Column(Numeric(10, 2), nullable=False)
    sold_for = Column(Numeric(10, 2), nullable=True)

    status = Column(String, nullable=False)
    # snapshot of route_statuses.color when the status was assigned
    status_color = Column(String(7), nullable=True)
    status_start_date = Column(Date, nullable=True)
    status_end_date = Column(Date, nullable=True)
    customer_load_number = Column(String, nullable=True)
    previous_route_ids = Column(JSON, nullable=False, default=list)

    last_comment_by = Column(String, nullable=True)
    last_comment_at = Column(DateTime, nullable=True)
    last_edited_by = Column(String, nullable=True)
    last_edited_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    driver = relationship("Driver", back_populates="routes", lazy="selectin")
    division = relationship("Division", lazy="selectin")
    comments = relationship(
        "RouteComment",
        back_populates="route",
        cascade="all, delete-orphan",
        order_by="RouteComment.created_at, RouteComment.id",
    )
    weekly_slots = relationship(
        "WeeklyRouteDetail", back_populates="route", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("rate >= 0", name="ck_routes_rate_nonneg"),
        CheckConstraint("sold_for IS NULL OR sold_for >= 0", name="ck_routes_sold_for_nonneg"),
        Index("idx_routes_driver_date", "driver_id", "date"),
    )

    @property
    def driver_name(self):
        return self.driver.full_name if self.driver else None

    @property
    def division_name(self):
        return self.division.name if self.division else None

    @property
    def mileage_is_estimate(self) -> bool:
        return self.mileage_source != MILEAGE_MANUAL


class RouteComment(Base):
    """Append-only comment on a route."""
    __tablename__ = "route_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(Integer, ForeignKey("routes.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    author = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    route = relationship("Route", back_populates="comments")

    __table_args__ = (
        Index("idx_route_comments_route", "route_id"),
    )


class RouteAudit(Base):
    """Immutable record of one create/update/delete on a route.

    ``route_id`` is deliberately not a foreign key: the trail outlives the route.
    """
    __tablename__ = "route_audits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(Integer, nullable=False)
    status = Column(String, nullable=False)  # created, updated, deleted
    comment = Column(String, nullable=True)
    user_name = Column(String, nullable=True)
    changed_fields = Column(JSON, nullable=False, default=list)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_route_audits_route", "route_id"),
    )
