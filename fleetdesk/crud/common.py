from contextlib import asynccontextmanager
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.errors import ConflictError, NotFoundError, TransientStoreError

log = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, conflict_message: str | None = None):
    """Commit everything done inside the block, or nothing.

    Integrity violations surface as ``ConflictError``; any other store failure
    as ``TransientStoreError`` carrying the driver's message.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        log.warning("integrity error, transaction rolled back: %s", exc.orig)
        raise ConflictError(conflict_message or str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        log.exception("store failure, transaction rolled back")
        raise TransientStoreError(str(exc)) from exc
    except BaseException:
        await db.rollback()
        raise


async def get_or_404(db: AsyncSession, model, obj_id: int, entity: str):
    obj = await db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(entity)
    return obj


def apply_updates(obj, updates: dict) -> list[str]:
    """Set attributes on a model instance, returning the names whose value changed."""
    changed = []
    for key, value in updates.items():
        if getattr(obj, key) != value:
            changed.append(key)
        setattr(obj, key, value)
    return changed
