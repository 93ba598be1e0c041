from datetime import datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.errors import NotFoundError
from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.db import get_db
from fleetdesk.models.user import User, UserPermission
from fleetdesk.schemas.common import MessageResponse
from fleetdesk.schemas.user import (
    UserCreate,
    UserPermissionCreate,
    UserPermissionRead,
    UserPermissionUpdate,
    UserRead,
    UserUpdate,
)

log = logging.getLogger(__name__)

user_router = APIRouter()
permission_router = APIRouter()


def _set_active(user: User, is_active: bool):
    if is_active and not user.is_active:
        user.deactivated_at = None
    elif not is_active and user.is_active:
        user.deactivated_at = datetime.utcnow()
    user.is_active = is_active


# ---------- Users ----------
@user_router.get("/", response_model=List[UserRead])
async def list_users(db: AsyncSession = Depends(get_db)):
    """Active users only; deactivated ones stay reachable by id."""
    result = await db.execute(select(User).where(User.is_active == True).order_by(User.name))  # noqa: E712
    return result.scalars().all()


@user_router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, User, user_id, "User")


@user_router.post("/", response_model=UserRead, status_code=201)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message=f"User with email '{payload.email}' already exists"):
        user = User(**payload.model_dump(exclude={"is_active"}), is_active=True)
        if not payload.is_active:
            _set_active(user, False)
        db.add(user)
        await db.flush()
    log.info("user created: id=%s email=%s", user.id, user.email)
    return user


@user_router.put("/{user_id}", response_model=UserRead)
async def update_user(user_id: int, payload: UserUpdate, db: AsyncSession = Depends(get_db)):
    updates = payload.model_dump(exclude_unset=True)
    is_active = updates.pop("is_active", None)
    async with atomic(db, conflict_message="User email already exists"):
        user = await get_or_404(db, User, user_id, "User")
        apply_updates(user, updates)
        if is_active is not None:
            _set_active(user, is_active)
    return user


@user_router.delete("/{user_id}", response_model=MessageResponse)
async def deactivate_user(user_id: int, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        user = await get_or_404(db, User, user_id, "User")
        _set_active(user, False)
    log.info("user deactivated: id=%s", user_id)
    return {"message": "User deactivated successfully"}


# ---------- Section permissions ----------
@permission_router.get("/", response_model=List[UserPermissionRead])
async def list_permissions(user_id: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    query = select(UserPermission)
    if user_id is not None:
        query = query.where(UserPermission.user_id == user_id)
    result = await db.execute(query.order_by(UserPermission.user_id, UserPermission.section))
    return result.scalars().all()


@permission_router.post("/", response_model=UserPermissionRead, status_code=201)
async def create_permission(payload: UserPermissionCreate, db: AsyncSession = Depends(get_db)):
    async with atomic(db, conflict_message=f"User already has a permission for section '{payload.section}'"):
        if await db.get(User, payload.user_id) is None:
            raise NotFoundError("User")
        permission = UserPermission(**payload.model_dump())
        db.add(permission)
        await db.flush()
    return permission


@permission_router.put("/{permission_id}", response_model=UserPermissionRead)
async def update_permission(
    permission_id: int, payload: UserPermissionUpdate, db: AsyncSession = Depends(get_db)
):
    updates = payload.model_dump(exclude_unset=True)
    async with atomic(db, conflict_message="User already has a permission for that section"):
        permission = await get_or_404(db, UserPermission, permission_id, "Permission")
        if updates.get("user_id") is not None and await db.get(User, updates["user_id"]) is None:
            raise NotFoundError("User")
        apply_updates(permission, updates)
    return permission


@permission_router.delete("/{permission_id}", response_model=MessageResponse)
async def delete_permission(permission_id: int, db: AsyncSession = Depends(get_db)):
    async with atomic(db):
        permission = await get_or_404(db, UserPermission, permission_id, "Permission")
        await db.delete(permission)
    return {"message": "Permission deleted successfully"}
