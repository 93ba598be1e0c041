from datetime import date as dt_date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from fleetdesk.schemas.earnings import EarningsSummaryRead
from fleetdesk.schemas.route import RouteRead


class WeeklyRouteCreate(BaseModel):
    driver_id: int
    division_id: Optional[int] = None
    dispatcher_id: Optional[int] = None
    week_start_date: dt_date
    week_end_date: Optional[dt_date] = None  # defaults to start + 6 days
    status: Optional[str] = None
    notes: Optional[str] = None
    user_name: Optional[str] = None


class WeeklyRouteUpdate(BaseModel):
    driver_id: Optional[int] = None
    division_id: Optional[int] = None
    dispatcher_id: Optional[int] = None
    week_start_date: Optional[dt_date] = None
    week_end_date: Optional[dt_date] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    user_name: Optional[str] = None


class WeeklyRouteRead(BaseModel):
    id: int
    driver_id: int
    driver_name: Optional[str] = None
    division_id: Optional[int] = None
    division_name: Optional[str] = None
    dispatcher_id: Optional[int] = None
    dispatcher_name: Optional[str] = None
    week_start_date: dt_date
    week_end_date: dt_date
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WeeklyRouteAttach(BaseModel):
    route_id: int
    day_of_week: int = Field(ge=0, le=6)
    sequence_number: Optional[int] = Field(default=None, ge=1)
    user_name: Optional[str] = None


class WeeklyRouteDetailRead(BaseModel):
    id: int
    weekly_route_id: int
    route_id: int
    day_of_week: int
    sequence_number: int
    created_at: datetime

    class Config:
        from_attributes = True


class WeeklyRouteSlotRead(WeeklyRouteDetailRead):
    route: RouteRead
    # live catalog color, next to the snapshot kept on the route
    catalog_color: Optional[str] = None


class WeeklyRouteAuditRead(BaseModel):
    id: int
    weekly_route_id: int
    user_name: Optional[str] = None
    action: str
    details: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class WeeklyRouteFullRead(WeeklyRouteRead):
    routes: List[WeeklyRouteSlotRead] = []
    audit_history: List[WeeklyRouteAuditRead] = []


class GridDriverRow(BaseModel):
    driver_id: int
    driver_name: str
    dispatcher_name: Optional[str] = None
    days: Dict[str, List[RouteRead]]
    earnings: EarningsSummaryRead


class WeekGridRead(BaseModel):
    week_start: dt_date
    week_end: dt_date
    label: str
    days: List[dt_date]
    drivers: List[GridDriverRow]
    totals: EarningsSummaryRead
