from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.db import get_db
from fleetdesk.schemas.weekly_route import (
    WeekGridRead,
    WeeklyRouteAttach,
    WeeklyRouteAuditRead,
    WeeklyRouteCreate,
    WeeklyRouteDetailRead,
    WeeklyRouteFullRead,
    WeeklyRouteRead,
    WeeklyRouteSlotRead,
    WeeklyRouteUpdate,
)
from fleetdesk.services import weekly_routes

router = APIRouter()


async def _full(db: AsyncSession, week_id: int) -> WeeklyRouteFullRead:
    detail = await weekly_routes.get_week_detail(db, week_id)
    return WeeklyRouteFullRead.model_validate(detail["week"]).model_copy(update={
        "routes": [WeeklyRouteSlotRead.model_validate(slot) for slot in detail["routes"]],
        "audit_history": [WeeklyRouteAuditRead.model_validate(a) for a in detail["audit_history"]],
    })


@router.get("/", response_model=List[WeeklyRouteRead])
async def list_weekly_routes(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    driver_id: Optional[int] = None,
    division_id: Optional[int] = None,
    dispatcher_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    return await weekly_routes.list_weeks(db, start_date, end_date, driver_id, division_id, dispatcher_id)


@router.get("/grid", response_model=WeekGridRead)
async def week_grid(week_start: Optional[date] = None, db: AsyncSession = Depends(get_db)):
    """Drivers x days board for the week containing ``week_start`` (this week by default)."""
    return await weekly_routes.week_grid(db, week_start or date.today())


@router.get("/{week_id}", response_model=WeeklyRouteFullRead)
async def get_weekly_route(week_id: int, db: AsyncSession = Depends(get_db)):
    return await _full(db, week_id)


@router.post("/", response_model=WeeklyRouteRead, status_code=201)
async def create_weekly_route(payload: WeeklyRouteCreate, db: AsyncSession = Depends(get_db)):
    return await weekly_routes.create_week(db, payload)


@router.put("/{week_id}", response_model=WeeklyRouteRead)
async def update_weekly_route(week_id: int, payload: WeeklyRouteUpdate, db: AsyncSession = Depends(get_db)):
    return await weekly_routes.update_week(db, week_id, payload)


@router.post("/{week_id}/routes", response_model=WeeklyRouteDetailRead, status_code=201)
async def attach_route(week_id: int, payload: WeeklyRouteAttach, db: AsyncSession = Depends(get_db)):
    return await weekly_routes.attach_route(db, week_id, payload)


@router.delete("/{week_id}/routes/{detail_id}", response_model=WeeklyRouteDetailRead)
async def detach_route(
    week_id: int,
    detail_id: int,
    user_name: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await weekly_routes.detach_route(db, week_id, detail_id, user_name)
