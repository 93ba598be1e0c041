from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.db import get_db
from fleetdesk.models.equipment import Trailer, Truck
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.equipment import (
    TrailerCreate,
    TrailerRead,
    TrailerUpdate,
    TruckCreate,
    TruckRead,
    TruckUpdate,
)

truck_router = APIRouter()
trailer_router = APIRouter()


# ---------- Trucks ----------
@truck_router.get("/", response_model=List[TruckRead])
async def list_trucks(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Truck).order_by(Truck.number))
    return result.scalars().all()


@truck_router.get("/{truck_id}", response_model=TruckRead)
async def get_truck(truck_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Truck, truck_id, "Truck")


@truck_router.post("/", response_model=TruckRead, status_code=201)
async def create_truck(payload: TruckCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message=f"Truck number '{payload.number}' already exists"):
        truck = Truck(**payload.model_dump())
        db.add(truck)
        await db.flush()
    return truck


@truck_router.put("/{truck_id}", response_model=TruckRead)
async def update_truck(truck_id: int, payload: TruckUpdate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message="Truck number already exists"):
        truck = await get_or_404(db, Truck, truck_id, "Truck")
        apply_updates(truck, payload.model_dump(exclude_unset=True))
    return truck


@truck_router.delete("/{truck_id}", response_model=MessageResponse)
async def delete_truck(truck_id: int, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        truck = await get_or_404(db, Truck, truck_id, "Truck")
        await db.delete(truck)
    return {"message": "Truck deleted successfully"}


# ---------- Trailers ----------
@trailer_router.get("/", response_model=List[TrailerRead])
async def list_trailers(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Trailer).order_by(Trailer.number))
    return result.scalars().all()


@trailer_router.get("/{trailer_id}", response_model=TrailerRead)
async def get_trailer(trailer_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Trailer, trailer_id, "Trailer")


@trailer_router.post("/", response_model=TrailerRead, status_code=201)
async def create_trailer(payload: TrailerCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message=f"Trailer number '{payload.number}' already exists"):
        trailer = Trailer(**payload.model_dump())
        db.add(trailer)
        await db.flush()
    return trailer


@trailer_router.put("/{trailer_id}", response_model=TrailerRead)
async def update_trailer(trailer_id: int, payload: TrailerUpdate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message="Trailer number already exists"):
        trailer = await get_or_404(db, Trailer, trailer_id, "Trailer")
        apply_updates(trailer, payload.model_dump(exclude_unset=True))
    return trailer


@trailer_router.delete("/{trailer_id}", response_model=MessageResponse)
async def delete_trailer(trailer_id: int, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        trailer = await get_or_404(db, Trailer, trailer_id, "Trailer")
        await db.delete(trailer)
    return {"message": "Trailer deleted successfully"}
