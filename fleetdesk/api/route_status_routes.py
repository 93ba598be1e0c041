from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.crud import route_status
from fleetdesk.db import get_db
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.route_status import (
    RouteStatusCreate,
    RouteStatusMove,
    RouteStatusRead,
    RouteStatusUpdate,
)

router = APIRouter()


@router.get("/", response_model=List[RouteStatusRead])
async def list_statuses(db: AsyncSession = Depends(get_db)):
    """Catalog in display order."""
    return await route_status.get_statuses(db)


@router.post("/", response_model=RouteStatusRead, status_code=201)
async def create_status(payload: RouteStatusCreate, db: AsyncSession = Depends(get_db)):
    return await route_status.create_status(db, payload)


@router.put("/{status_id}", response_model=RouteStatusRead)
async def update_status(status_id: int, payload: RouteStatusUpdate, db: AsyncSession = Depends(get_db)):
    return await route_status.update_status(db, status_id, payload)


@router.delete("/{status_id}", response_model=MessageResponse)
async def delete_status(status_id: int, db: AsyncSession = Depends(get_db)):
    await route_status.delete_status(db, status_id)
    return {"message": "Route status deleted"}


@router.post("/{status_id}/default", response_model=RouteStatusRead)
async def set_default_status(status_id: int, db: AsyncSession = Depends(get_db)):
    return await route_status.set_default_status(db, status_id)


@router.post("/{status_id}/move", response_model=List[RouteStatusRead])
async def move_status(status_id: int, payload: RouteStatusMove, db: AsyncSession = Depends(get_db)):
    """Swap with the neighbour above or below; returns the reordered catalog."""
    return await route_status.move_status(db, status_id, payload.direction)
