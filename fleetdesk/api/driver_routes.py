from typing import List
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.errors import ConflictError, NotFoundError
from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.db import get_db
from fleetdesk.models.dispatcher import Dispatcher
from fleetdesk.models.driver import Driver
from fleetdesk.models.route import Route
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.driver import DriverCreate, DriverRead, DriverUpdate

log = logging.getLogger(__name__)

router = APIRouter()


async def _check_dispatcher(db: AsyncSession, dispatcher_id):
    if dispatcher_id is not None and await db.get(Dispatcher, dispatcher_id) is None:
        raise NotFoundError("Dispatcher")


@router.get("/", response_model=List[DriverRead])
async def list_drivers(db: AsyncSession = Depends(get_db)):
    """Board order: count, then name."""
    result = await db.execute(
        select(Driver).order_by(Driver.count, Driver.last_name, Driver.first_name)
    )
    return result.scalars().all()


@router.get("/{driver_id}", response_model=DriverRead)
async def get_driver(driver_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Driver, driver_id, "Driver")


@router.post("/", response_model=DriverRead, status_code=201)
async def create_driver(payload: DriverCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        await _check_dispatcher(db, payload.dispatcher_id)
        driver = Driver(**payload.model_dump())
        db.add(driver)
        await db.flush()
    log.info("driver created: id=%s name=%s", driver.id, driver.full_name)
    return await db.get(Driver, driver.id, populate_existing=True)


@router.put("/{driver_id}", response_model=DriverRead)
async def update_driver(driver_id: int, payload: DriverUpdate, db: AsyncSession = Depends(get_db)):
    updates = payload.model_dump(exclude_unset=True)
    async with atomic(db):
        driver = await get_or_404(db, Driver, driver_id, "Driver")
        if "dispatcher_id" in updates:
            await _check_dispatcher(db, updates["dispatcher_id"])
        apply_updates(driver, updates)
    return await db.get(Driver, driver_id, populate_existing=True)


@router.delete("/{driver_id}", response_model=MessageResponse)
async def delete_driver(driver_id: int, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        driver = await get_or_404(db, Driver, driver_id, "Driver")
        route_count = (await db.execute(
            select(func.count(Route.id)).where(Route.driver_id == driver_id)
        )).scalar()
        if route_count:
            raise ConflictError(f"Driver has {route_count} routes and cannot be deleted")
        await db.delete(driver)
    log.info("driver deleted: id=%s", driver_id)
    return {"message": "Driver deleted successfully"}
