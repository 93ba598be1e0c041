from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.db import get_db
from fleetdesk.models.division import Division
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.division import DivisionCreate, DivisionRead, DivisionUpdate

router = APIRouter()


@router.get("/", response_model=List[DivisionRead])
async def list_divisions(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Division).order_by(Division.name))
    return result.scalars().all()


@router.get("/{division_id}", response_model=DivisionRead)
async def get_division(division_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Division, division_id, "Division")


@router.post("/", response_model=DivisionRead, status_code=201)
async def create_division(payload: DivisionCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message=f"Division '{payload.name}' already exists"):
        division = Division(**payload.model_dump())
        db.add(division)
        await db.flush()
    return division


@router.put("/{division_id}", response_model=DivisionRead)
async def update_division(division_id: int, payload: DivisionUpdate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message="Division name already exists"):
        division = await get_or_404(db, Division, division_id, "Division")
        apply_updates(division, payload.model_dump(exclude_unset=True))
    return division


@router.delete("/{division_id}", response_model=MessageResponse)
async def delete_division(division_id: int, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        division = await get_or_404(db, Division, division_id, "Division")
        await db.delete(division)
    return {"message": "Division deleted successfully"}
