"""
Route status catalog.

Exactly one status is the default. Setting one clears the flag on every row
and then sets it on the target, both inside the same transaction. Two
concurrent "set default" requests can both commit; the last commit wins.
"""
from typing import Optional
import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.constants import DEFAULT_ROUTE_STATUSES, DEFAULT_STATUS_NAME
from fleetdesk.core.errors import ConflictError, NotFoundError
from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.models.route_status import RouteStatus
from fleetdesk.schemas.route_status import RouteStatusCreate, RouteStatusUpdate

log = logging.getLogger(__name__)

ENTITY = "Route status"


async def get_statuses(db: AsyncSession):
    result = await db.execute(
        select(RouteStatus)
        .order_by(RouteStatus.sort_order, RouteStatus.id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def get_status_by_name(db: AsyncSession, name: str) -> Optional[RouteStatus]:
    result = await db.execute(select(RouteStatus).where(RouteStatus.name == name))
    return result.scalar_one_or_none()


async def get_status_color(db: AsyncSession, name: Optional[str]) -> Optional[str]:
    """Color of the named status, or None for a name the catalog doesn't know."""
    if not name:
        return None
    status = await get_status_by_name(db, name)
    return status.color if status else None


async def get_default_status(db: AsyncSession) -> Optional[RouteStatus]:
    result = await db.execute(select(RouteStatus).where(RouteStatus.is_default == True))  # noqa: E712
    return result.scalars().first()


async def _clear_default(db: AsyncSession):
    await db.execute(update(RouteStatus).values(is_default=False))


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[int] = None):
    existing = await get_status_by_name(db, name)
    if existing and existing.id != exclude_id:
        raise ConflictError(f"Route status '{name}' already exists")


async def create_status(db: AsyncSession, payload: RouteStatusCreate) -> RouteStatus:
    async with atomic(db, conflict_message=f"Route status '{payload.name}' already exists"):
        await _ensure_name_free(db, payload.name)
        sort_order = payload.sort_order
        if sort_order is None:
            highest = (await db.execute(select(func.max(RouteStatus.sort_order)))).scalar()
            sort_order = (highest or 0) + 1
        if payload.is_default:
            await _clear_default(db)
        status = RouteStatus(
            name=payload.name,
            color=payload.color,
            is_default=payload.is_default,
            sort_order=sort_order,
        )
        db.add(status)
        await db.flush()
    log.info("route status created: id=%s name=%s default=%s", status.id, status.name, status.is_default)
    return status


async def update_status(db: AsyncSession, status_id: int, payload: RouteStatusUpdate) -> RouteStatus:
    updates = payload.model_dump(exclude_unset=True)
    async with atomic(db, conflict_message="Route status name already exists"):
        status = await get_or_404(db, RouteStatus, status_id, ENTITY)
        if updates.get("name"):
            await _ensure_name_free(db, updates["name"], exclude_id=status.id)
        if updates.get("is_default"):
            await _clear_default(db)
            await db.refresh(status)
        elif updates.get("is_default") is False and status.is_default:
            raise ConflictError("Cannot unset the default route status. Set another status as default instead.")
        apply_updates(status, {k: v for k, v in updates.items() if v is not None})
        await db.flush()
    log.info("route status updated: id=%s fields=%s", status.id, sorted(updates))
    return status


async def set_default_status(db: AsyncSession, status_id: int) -> RouteStatus:
    async with atomic(db):
        status = await get_or_404(db, RouteStatus, status_id, ENTITY)
        await _clear_default(db)
        await db.refresh(status)
        status.is_default = True
        await db.flush()
    log.info("route status default set: id=%s name=%s", status.id, status.name)
    return status


async def delete_status(db: AsyncSession, status_id: int):
    async with atomic(db):
        status = await get_or_404(db, RouteStatus, status_id, ENTITY)
        if status.is_default:
            raise ConflictError(
                "Cannot delete the default route status. Please set another status as default first."
            )
        await db.delete(status)
    log.info("route status deleted: id=%s name=%s", status_id, status.name)


async def move_status(db: AsyncSession, status_id: int, direction: str):
    """Swap sort_order with the neighbour above or below. No-op at either end."""
    async with atomic(db):
        statuses = list(await get_statuses(db))
        index = next((i for i, s in enumerate(statuses) if s.id == status_id), None)
        if index is None:
            raise NotFoundError(ENTITY)
        neighbour_index = index - 1 if direction == "up" else index + 1
        if 0 <= neighbour_index < len(statuses):
            current, neighbour = statuses[index], statuses[neighbour_index]
            if current.sort_order == neighbour.sort_order:
                # equal orders can't be swapped meaningfully; spread them out first
                for position, s in enumerate(statuses, start=1):
                    s.sort_order = position
            current.sort_order, neighbour.sort_order = neighbour.sort_order, current.sort_order
            await db.flush()
    return await get_statuses(db)


async def seed_default_statuses(db: AsyncSession) -> int:
    """Insert the stock catalog into an empty table. Returns rows added."""
    existing = (await db.execute(select(func.count(RouteStatus.id)))).scalar()
    if existing:
        return 0
    async with atomic(db):
        for position, (name, color) in enumerate(DEFAULT_ROUTE_STATUSES, start=1):
            db.add(RouteStatus(
                name=name,
                color=color,
                is_default=name == DEFAULT_STATUS_NAME,
                sort_order=position,
            ))
    log.info("seeded %s route statuses", len(DEFAULT_ROUTE_STATUSES))
    return len(DEFAULT_ROUTE_STATUSES)
