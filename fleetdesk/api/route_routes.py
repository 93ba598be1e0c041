from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.crud import route_audit
from fleetdesk.db import get_db
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.route import (
    PreviousRoutesRead,
    RouteAuditRead,
    RouteCommentCreate,
    RouteCommentRead,
    RouteCreate,
    RouteDelete,
    RouteDetailRead,
    RouteEarningsRead,
    RouteRead,
    RouteUpdate,
)
from fleetdesk.services import earnings, route_engine

router = APIRouter()


async def _detail(db: AsyncSession, route_id: int) -> RouteDetailRead:
    route = await route_engine.get_route(db, route_id)
    audits = await route_audit.get_route_audits(db, route_id)
    return RouteDetailRead.model_validate(route).model_copy(update={
        "comments": [RouteCommentRead.model_validate(c) for c in reversed(route.comments)],
        "audit_history": [RouteAuditRead.model_validate(a) for a in audits],
    })


@router.get("/", response_model=List[RouteRead])
async def list_routes(
    driver_id: Optional[int] = None,
    division_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await route_engine.list_routes(db, driver_id, division_id, start_date, end_date, status)


@router.get("/previous", response_model=PreviousRoutesRead)
async def previous_routes(driver_id: int, before: date, db: AsyncSession = Depends(get_db)):
    """Candidates for the "Driving previous route" picker, newest first."""
    suggested_id, routes = await route_engine.suggest_previous_routes(db, driver_id, before)
    return {"suggested_route_id": suggested_id, "routes": routes}


@router.get("/{route_id}", response_model=RouteDetailRead)
async def get_route(route_id: int, db: AsyncSession = Depends(get_db)):
    """Route with its comments and audit history, both newest first."""
    return await _detail(db, route_id)


@router.post("/", response_model=RouteDetailRead, status_code=201)
async def create_route(payload: RouteCreate, db: AsyncSession = Depends(get_db)):
    route = await route_engine.create_route(db, payload)
    return await _detail(db, route.id)


@router.put("/{route_id}", response_model=RouteDetailRead)
async def update_route(route_id: int, payload: RouteUpdate, db: AsyncSession = Depends(get_db)):
    await route_engine.update_route(db, route_id, payload)
    return await _detail(db, route_id)


@router.delete("/{route_id}", response_model=MessageResponse)
async def delete_route(
    route_id: int,
    payload: Optional[RouteDelete] = Body(default=None),
    db: AsyncSession = Depends(get_db),
):
    await route_engine.delete_route(db, route_id, payload.user_name if payload else None)
    return {"message": "Route deleted successfully"}


@router.post("/{route_id}/comments", response_model=RouteCommentRead, status_code=201)
async def add_comment(route_id: int, payload: RouteCommentCreate, db: AsyncSession = Depends(get_db)):
    return await route_engine.add_comment(db, route_id, payload.text, payload.author)


@router.get("/{route_id}/earnings", response_model=RouteEarningsRead)
async def route_earnings(route_id: int, db: AsyncSession = Depends(get_db)):
    route = await route_engine.get_route(db, route_id)
    percentage = route.driver.percentage if route.driver else 0
    return {
        "route_id": route.id,
        "rate": route.rate,
        "sold_for": route.sold_for,
        "driver_percentage": percentage,
        "gross_difference": earnings.gross_difference(route.rate, route.sold_for),
        "percentage_income": earnings.percentage_income(route.sold_for, percentage),
        "total_earnings": earnings.total_earnings(route.rate, route.sold_for, percentage),
    }
