from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.models.weekly_route import WeeklyRouteAudit


async def create_weekly_route_audit(
    db: AsyncSession, weekly_route_id: int, action: str, details: str, user_name: Optional[str] = None
) -> WeeklyRouteAudit:
    audit = WeeklyRouteAudit(
        weekly_route_id=weekly_route_id,
        action=action,
        details=details,
        user_name=user_name,
    )
    db.add(audit)
    await db.flush()
    return audit


async def get_weekly_route_audits(db: AsyncSession, weekly_route_id: int):
    result = await db.execute(
        select(WeeklyRouteAudit)
        .where(WeeklyRouteAudit.weekly_route_id == weekly_route_id)
        .order_by(WeeklyRouteAudit.created_at.desc(), WeeklyRouteAudit.id.desc())
    )
    return result.scalars().all()
