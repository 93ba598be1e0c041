from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.models.route import Route, RouteComment


async def create_route_comment(
    db: AsyncSession, route: Route, text: str, author: Optional[str]
) -> RouteComment:
    """Append a comment and move the route's last-comment pointer to it."""
    comment = RouteComment(route_id=route.id, text=text, author=author, created_at=datetime.utcnow())
    db.add(comment)
    route.last_comment_by = author
    route.last_comment_at = comment.created_at
    await db.flush()
    return comment
