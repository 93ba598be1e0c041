from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.models.route import RouteAudit


async def create_route_audit(
    db: AsyncSession,
    route_id: int,
    status: str,
    comment: str,
    user_name: Optional[str],
    changed_fields: list[str],
    old_values: Optional[dict] = None,
    new_values: Optional[dict] = None,
) -> RouteAudit:
    audit = RouteAudit(
        route_id=route_id,
        status=status,
        comment=comment,
        user_name=user_name,
        changed_fields=changed_fields,
        old_values=old_values,
        new_values=new_values,
    )
    db.add(audit)
    await db.flush()
    return audit


async def get_route_audits(db: AsyncSession, route_id: int):
    """Newest first."""
    result = await db.execute(
        select(RouteAudit)
        .where(RouteAudit.route_id == route_id)
        .order_by(RouteAudit.created_at.desc(), RouteAudit.id.desc())
    )
    return result.scalars().all()
