from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.db import get_db
from fleetdesk.models.dispatcher import Dispatcher
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.dispatcher import DispatcherCreate, DispatcherRead, DispatcherUpdate

router = APIRouter()


@router.get("/", response_model=List[DispatcherRead])
async def list_dispatchers(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Dispatcher).order_by(Dispatcher.last_name, Dispatcher.first_name))
    return result.scalars().all()


@router.get("/{dispatcher_id}", response_model=DispatcherRead)
async def get_dispatcher(dispatcher_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Dispatcher, dispatcher_id, "Dispatcher")


@router.post("/", response_model=DispatcherRead, status_code=201)
async def create_dispatcher(payload: DispatcherCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        dispatcher = Dispatcher(**payload.model_dump())
        db.add(dispatcher)
        await db.flush()
    return dispatcher


@router.put("/{dispatcher_id}", response_model=DispatcherRead)
async def update_dispatcher(dispatcher_id: int, payload: DispatcherUpdate, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        dispatcher = await get_or_404(db, Dispatcher, dispatcher_id, "Dispatcher")
        apply_updates(dispatcher, payload.model_dump(exclude_unset=True))
    return await db.get(Dispatcher, dispatcher_id, populate_existing=True)


@router.delete("/{dispatcher_id}", response_model=MessageResponse)
async def delete_dispatcher(dispatcher_id: int, db: AsyncSession = Depends(get_db)):
    """Drivers and weekly routes of the dispatcher are kept, unassigned."""
    async with atomic(db):
        dispatcher = await get_or_404(db, Dispatcher, dispatcher_id, "Dispatcher")
        await db.delete(dispatcher)
    return {"message": "Dispatcher deleted successfully"}
