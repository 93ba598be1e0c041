from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.errors import ValidationError
from fleetdesk.db import get_db
from fleetdesk.schemas.earnings import DispatcherRankingsRead
from fleetdesk.services import earnings

router = APIRouter()


@router.get("/dispatcher-rankings", response_model=DispatcherRankingsRead)
async def dispatcher_rankings(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """Per-dispatcher totals over their drivers' routes, with the leader for each metric."""
    if start_date and end_date and end_date < start_date:
        raise ValidationError("end_date must not be before start_date")
    stats = await earnings.dispatcher_stats(db, start_date, end_date)
    top = earnings.rank_dispatchers(stats)
    return {
        "start_date": start_date,
        "end_date": end_date,
        "top_by_total_earnings": top["total_earnings"],
        "top_by_gross_difference": top["gross_difference"],
        "top_by_percentage_income": top["percentage_income"],
        "dispatchers": stats,
    }
