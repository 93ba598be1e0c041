from datetime import date as dt_date
from typing import List, Optional

from pydantic import BaseModel

from fleetdesk.schemas.common import Money


class EarningsSummaryRead(BaseModel):
    route_count: int
    gross: Money
    gross_difference: Money
    percentage_income: Money
    total_earnings: Money

    class Config:
        from_attributes = True


class DispatcherStatsRead(EarningsSummaryRead):
    dispatcher_id: int
    dispatcher_name: str


class DispatcherRankingsRead(BaseModel):
    start_date: Optional[dt_date] = None
    end_date: Optional[dt_date] = None
    top_by_total_earnings: Optional[DispatcherStatsRead] = None
    top_by_gross_difference: Optional[DispatcherStatsRead] = None
    top_by_percentage_income: Optional[DispatcherStatsRead] = None
    dispatchers: List[DispatcherStatsRead] = []
