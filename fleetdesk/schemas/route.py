from datetime import date as dt_date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from fleetdesk.schemas.common import Money


# ---------- Comments ----------
class RouteCommentCreate(BaseModel):
    text: str = Field(min_length=1)
    author: Optional[str] = None


class RouteCommentRead(BaseModel):
    id: int
    route_id: int
    text: str
    author: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ---------- Audits ----------
class RouteAuditRead(BaseModel):
    id: int
    route_id: int
    status: str
    comment: Optional[str] = None
    user_name: Optional[str] = None
    changed_fields: List[str] = []
    old_values: Optional[dict] = None
    new_values: Optional[dict] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ---------- Routes ----------
class RouteBase(BaseModel):
    driver_id: int
    date: dt_date
    pickup_zip: str
    delivery_zip: str
    rate: Decimal
    sold_for: Optional[Decimal] = None
    division_id: Optional[int] = None
    status: Optional[str] = None
    status_start_date: Optional[dt_date] = None
    status_end_date: Optional[dt_date] = None
    customer_load_number: Optional[str] = None
    previous_route_ids: List[int] = []
    # Only consulted when the ZIP is unknown to the resolver
    pickup_city: Optional[str] = None
    pickup_state: Optional[str] = None
    pickup_county: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_county: Optional[str] = None
    # Manual override; estimated from the ZIP pair when omitted
    mileage: Optional[int] = Field(default=None, ge=0)


class RouteCreate(RouteBase):
    comment: Optional[str] = None
    user_name: Optional[str] = None


class RouteUpdate(BaseModel):
    driver_id: Optional[int] = None
    date: Optional[dt_date] = None
    pickup_zip: Optional[str] = None
    delivery_zip: Optional[str] = None
    rate: Optional[Decimal] = None
    sold_for: Optional[Decimal] = None
    division_id: Optional[int] = None
    status: Optional[str] = None
    status_start_date: Optional[dt_date] = None
    status_end_date: Optional[dt_date] = None
    customer_load_number: Optional[str] = None
    previous_route_ids: Optional[List[int]] = None
    pickup_city: Optional[str] = None
    pickup_state: Optional[str] = None
    pickup_county: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_county: Optional[str] = None
    mileage: Optional[int] = Field(default=None, ge=0)
    comment: Optional[str] = None
    user_name: Optional[str] = None


class RouteDelete(BaseModel):
    user_name: Optional[str] = None


class RouteRead(BaseModel):
    id: int
    driver_id: int
    driver_name: Optional[str] = None
    division_id: Optional[int] = None
    division_name: Optional[str] = None
    date: dt_date
    pickup_zip: str
    pickup_city: Optional[str] = None
    pickup_state: Optional[str] = None
    pickup_county: Optional[str] = None
    delivery_zip: str
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_county: Optional[str] = None
    mileage: Optional[int] = None
    mileage_source: Optional[str] = None
    mileage_is_estimate: bool
    rate: Money
    sold_for: Optional[Money] = None
    status: str
    status_color: Optional[str] = None
    status_start_date: Optional[dt_date] = None
    status_end_date: Optional[dt_date] = None
    customer_load_number: Optional[str] = None
    previous_route_ids: List[int] = []
    last_comment_by: Optional[str] = None
    last_comment_at: Optional[datetime] = None
    last_edited_by: Optional[str] = None
    last_edited_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RouteDetailRead(RouteRead):
    comments: List[RouteCommentRead] = []
    audit_history: List[RouteAuditRead] = []


class PreviousRoutesRead(BaseModel):
    suggested_route_id: Optional[int] = None
    routes: List[RouteRead] = []


class RouteEarningsRead(BaseModel):
    route_id: int
    rate: Money
    sold_for: Optional[Money] = None
    driver_percentage: Money
    gross_difference: Money
    percentage_income: Money
    total_earnings: Money
