"""
Route lifecycle.

Every mutation runs in one ``atomic()`` block: the route row, its audit row
and any comment are committed together or not at all. Validation and ZIP
resolution happen before the route is touched, so a rejected request leaves
nothing behind except best-effort ZIP cache entries.

Audit rows:
  created  changed_fields ["all"], new_values = full row
  updated  changed_fields = the audited fields that differ, old/new values for those only;
           skipped entirely when nothing differs
  deleted  changed_fields ["all"], old_values = full row, written before the delete
"""
from datetime import date, datetime, timedelta
from typing import Optional
import logging

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fleetdesk.core.constants import (
    ALL_FIELDS, AUDIT_CREATED, AUDIT_DELETED, AUDIT_UPDATED, DEFAULT_STATUS_NAME, DRIVING_PREVIOUS_ROUTE,
    HOMETIME, MAX_PREVIOUS_ROUTES, MILEAGE_MANUAL, PREVIOUS_ROUTE_WINDOW_DAYS, WEEK_ROUTE_REMOVED, ZIP_PATTERN,
)
from fleetdesk.core.errors import NotFoundError, ValidationError
from fleetdesk.crud import route_audit, route_comment, route_status, weekly_route_audit
from fleetdesk.crud.common import atomic, get_or_404
from fleetdesk.models.division import Division
from fleetdesk.models.driver import Driver
from fleetdesk.models.route import Route
from fleetdesk.models.weekly_route import WeeklyRouteDetail
from fleetdesk.schemas.route import RouteCreate, RouteUpdate
from fleetdesk.services.distance import estimate_distance
from fleetdesk.services.zip_locator import Location, remember_zip, try_resolve_zip

log = logging.getLogger(__name__)

ENTITY = "Route"

ROUTE_FIELDS = [column.key for column in Route.__table__.columns]

# bookkeeping columns, never part of an update diff
UNAUDITED_FIELDS = {
    "id", "created_at", "updated_at",
    "last_edited_by", "last_edited_at",
    "last_comment_by", "last_comment_at",
}
AUDITED_FIELDS = [name for name in ROUTE_FIELDS if name not in UNAUDITED_FIELDS]

# must stay non-null once set
REQUIRED_FIELDS = ("driver_id", "date", "pickup_zip", "delivery_zip", "rate", "status")


def serialize_route(route: Route, fields=None) -> dict:
    """Plain JSON-ready dict of the route's columns (all of them by default)."""
    return jsonable_encoder({name: getattr(route, name) for name in (fields or ROUTE_FIELDS)})


# ---------- validation ----------

def _check_zip(value: Optional[str], side: str):
    if not value or not ZIP_PATTERN.match(value):
        raise ValidationError(f"{side}_zip must be a 5-digit ZIP code")


def _check_amounts(rate, sold_for):
    if rate is not None and rate < 0:
        raise ValidationError("rate must not be negative")
    if sold_for is not None and sold_for < 0:
        raise ValidationError("sold_for must not be negative")


async def _check_references(db: AsyncSession, driver_id: int, division_id: Optional[int]):
    if await db.get(Driver, driver_id) is None:
        raise NotFoundError("Driver")
    if division_id is not None and await db.get(Division, division_id) is None:
        raise NotFoundError("Division")


async def _check_status_rules(
    db: AsyncSession,
    status: str,
    previous_route_ids: list,
    start: Optional[date],
    end: Optional[date],
    route_id: Optional[int] = None,
):
    if status == DRIVING_PREVIOUS_ROUTE:
        if not previous_route_ids:
            raise ValidationError(f"Status '{DRIVING_PREVIOUS_ROUTE}' requires at least one previous route")
        if len(previous_route_ids) > MAX_PREVIOUS_ROUTES:
            raise ValidationError(f"At most {MAX_PREVIOUS_ROUTES} previous routes can be selected")
        if route_id is not None and route_id in previous_route_ids:
            raise ValidationError("A route cannot be its own previous route")
        found = (await db.execute(select(Route.id).where(Route.id.in_(previous_route_ids)))).scalars().all()
        missing = sorted(set(previous_route_ids) - set(found))
        if missing:
            raise ValidationError(f"Previous routes not found: {', '.join(str(i) for i in missing)}")

    if status == HOMETIME:
        if start is None or end is None:
            raise ValidationError(f"Status '{HOMETIME}' requires status_start_date and status_end_date")
        if end < start:
            raise ValidationError("status_end_date must not be before status_start_date")


async def _locate(
    db: AsyncSession,
    side: str,
    zip_code: str,
    city: Optional[str],
    state: Optional[str],
    county: Optional[str],
) -> Location:
    """Resolved location for one end of a route.

    The resolver wins. Client-supplied city/state only count for a ZIP it does
    not know, and are then cached so the next lookup finds them.
    """
    location = await try_resolve_zip(db, zip_code)
    if location is not None:
        return location

    if not city or not state:
        raise ValidationError(f"Unknown {side} ZIP {zip_code}: {side}_city and {side}_state are required")
    location = Location(zip_code, city.strip(), state.strip().upper(), county)
    try:
        await remember_zip(db, location)
    except SQLAlchemyError as exc:
        log.warning("zip cache write failed: zip=%s error=%s", zip_code, exc)
    return location


def _location_fields(side: str, location: Location) -> dict:
    return {
        f"{side}_zip": location.zip_code,
        f"{side}_city": location.city,
        f"{side}_state": location.state,
        f"{side}_county": location.county,
    }


# ---------- reads ----------

async def get_route(db: AsyncSession, route_id: int) -> Route:
    """Fresh copy of the route with its comment thread loaded (oldest first)."""
    result = await db.execute(
        select(Route)
        .options(selectinload(Route.comments))
        .where(Route.id == route_id)
        .execution_options(populate_existing=True)
    )
    route = result.scalar_one_or_none()
    if route is None:
        raise NotFoundError(ENTITY)
    return route


async def list_routes(
    db: AsyncSession,
    driver_id: Optional[int] = None,
    division_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
):
    query = select(Route)
    if driver_id is not None:
        query = query.where(Route.driver_id == driver_id)
    if division_id is not None:
        query = query.where(Route.division_id == division_id)
    if start_date:
        query = query.where(Route.date >= start_date)
    if end_date:
        query = query.where(Route.date <= end_date)
    if status:
        query = query.where(Route.status == status)
    result = await db.execute(
        query.order_by(Route.date.desc(), Route.id.desc()).execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def suggest_previous_routes(db: AsyncSession, driver_id: int, before: date):
    """Candidates for "Driving previous route": the driver's routes from the
    two weeks before ``before`` (that day excluded), newest first.

    Returns ``(suggested_id, routes)`` where the suggestion is the newest one.
    """
    if await db.get(Driver, driver_id) is None:
        raise NotFoundError("Driver")
    result = await db.execute(
        select(Route)
        .where(
            Route.driver_id == driver_id,
            Route.date >= before - timedelta(days=PREVIOUS_ROUTE_WINDOW_DAYS),
            Route.date < before,
        )
        .order_by(Route.date.desc(), Route.id.desc())
    )
    routes = result.scalars().all()
    return (routes[0].id if routes else None), routes


# ---------- writes ----------

async def create_route(db: AsyncSession, payload: RouteCreate) -> Route:
    data = payload.model_dump(exclude={"comment", "user_name"})
    _check_zip(data["pickup_zip"], "pickup")
    _check_zip(data["delivery_zip"], "delivery")
    _check_amounts(data["rate"], data["sold_for"])

    async with atomic(db):
        await _check_references(db, data["driver_id"], data["division_id"])

        status = (data["status"] or "").strip()
        if not status:
            default = await route_status.get_default_status(db)
            status = default.name if default else DEFAULT_STATUS_NAME
        previous_route_ids = list(data["previous_route_ids"] or [])
        await _check_status_rules(
            db, status, previous_route_ids, data["status_start_date"], data["status_end_date"]
        )

        pickup = await _locate(
            db, "pickup", data["pickup_zip"], data["pickup_city"], data["pickup_state"], data["pickup_county"]
        )
        delivery = await _locate(
            db, "delivery", data["delivery_zip"], data["delivery_city"], data["delivery_state"], data["delivery_county"]
        )
        if data["mileage"] is not None:
            mileage, mileage_source = data["mileage"], MILEAGE_MANUAL
        else:
            estimate = estimate_distance(pickup.zip_code, delivery.zip_code, pickup, delivery)
            mileage, mileage_source = estimate.miles, estimate.method

        route = Route(
            driver_id=data["driver_id"],
            division_id=data["division_id"],
            date=data["date"],
            **_location_fields("pickup", pickup),
            **_location_fields("delivery", delivery),
            mileage=mileage,
            mileage_source=mileage_source,
            rate=data["rate"],
            sold_for=data["sold_for"],
            status=status,
            status_color=await route_status.get_status_color(db, status),
            status_start_date=data["status_start_date"],
            status_end_date=data["status_end_date"],
            customer_load_number=data["customer_load_number"],
            previous_route_ids=previous_route_ids,
            last_edited_by=payload.user_name,
            last_edited_at=datetime.utcnow(),
        )
        db.add(route)
        await db.flush()

        await route_audit.create_route_audit(
            db,
            route_id=route.id,
            status=AUDIT_CREATED,
            comment="Route created",
            user_name=payload.user_name,
            changed_fields=[ALL_FIELDS],
            new_values=serialize_route(route),
        )
        if payload.comment:
            await route_comment.create_route_comment(db, route, payload.comment, payload.user_name)

    log.info(
        "route created: id=%s driver=%s date=%s status=%s mileage=%s (%s)",
        route.id, route.driver_id, route.date, route.status, route.mileage, route.mileage_source,
    )
    return await get_route(db, route.id)


async def update_route(db: AsyncSession, route_id: int, payload: RouteUpdate) -> Route:
    updates = payload.model_dump(exclude_unset=True, exclude={"comment", "user_name"})
    for name in REQUIRED_FIELDS:
        if name in updates and updates[name] is None:
            raise ValidationError(f"{name} cannot be null")
    if "pickup_zip" in updates:
        _check_zip(updates["pickup_zip"], "pickup")
    if "delivery_zip" in updates:
        _check_zip(updates["delivery_zip"], "delivery")
    _check_amounts(updates.get("rate"), updates.get("sold_for"))
    if "status" in updates:
        updates["status"] = updates["status"].strip()
        if not updates["status"]:
            raise ValidationError("status cannot be empty")

    async with atomic(db):
        route = await get_or_404(db, Route, route_id, ENTITY)

        target = {name: updates.get(name, getattr(route, name)) for name in AUDITED_FIELDS}
        target["previous_route_ids"] = list(target["previous_route_ids"] or [])

        if "driver_id" in updates or "division_id" in updates:
            await _check_references(db, target["driver_id"], target["division_id"])
        await _check_status_rules(
            db, target["status"], target["previous_route_ids"],
            target["status_start_date"], target["status_end_date"], route_id=route.id,
        )

        # ZIP resolution may write to the cache on its own session, so it runs
        # before the route is dirtied.
        zips_changed = False
        locations = {}
        for side in ("pickup", "delivery"):
            zip_code = target[f"{side}_zip"]
            if zip_code == getattr(route, f"{side}_zip"):
                # unchanged ZIP keeps the stored location, client city/state are ignored
                locations[side] = Location(
                    zip_code,
                    getattr(route, f"{side}_city"),
                    getattr(route, f"{side}_state"),
                    getattr(route, f"{side}_county"),
                )
            else:
                zips_changed = True
                locations[side] = await _locate(
                    db, side, zip_code,
                    updates.get(f"{side}_city"), updates.get(f"{side}_state"), updates.get(f"{side}_county"),
                )
            target.update(_location_fields(side, locations[side]))

        # an explicit mileage sent along with a new ZIP counts as manual even if unchanged
        manual_mileage = updates.get("mileage")
        if manual_mileage is not None and (zips_changed or manual_mileage != route.mileage):
            target["mileage"], target["mileage_source"] = manual_mileage, MILEAGE_MANUAL
        elif zips_changed or ("mileage" in updates and manual_mileage is None):
            estimate = estimate_distance(
                target["pickup_zip"], target["delivery_zip"], locations["pickup"], locations["delivery"]
            )
            target["mileage"], target["mileage_source"] = estimate.miles, estimate.method
        else:
            target["mileage"], target["mileage_source"] = route.mileage, route.mileage_source

        if target["status"] != route.status:
            target["status_color"] = await route_status.get_status_color(db, target["status"])
        else:
            target["status_color"] = route.status_color

        changed = [name for name in AUDITED_FIELDS if getattr(route, name) != target[name]]
        old_values = serialize_route(route, changed) if changed else None
        for name in changed:
            setattr(route, name, target[name])

        if changed or payload.comment:
            route.last_edited_by = payload.user_name
            route.last_edited_at = datetime.utcnow()
        await db.flush()

        if changed:
            await route_audit.create_route_audit(
                db,
                route_id=route.id,
                status=AUDIT_UPDATED,
                comment="Route updated",
                user_name=payload.user_name,
                changed_fields=changed,
                old_values=old_values,
                new_values=serialize_route(route, changed),
            )
        if payload.comment:
            await route_comment.create_route_comment(db, route, payload.comment, payload.user_name)

    if changed:
        log.info("route updated: id=%s fields=%s by=%s", route_id, changed, payload.user_name)
    else:
        log.debug("route update was a no-op: id=%s", route_id)
    return await get_route(db, route_id)


async def delete_route(db: AsyncSession, route_id: int, user_name: Optional[str] = None):
    async with atomic(db):
        route = await get_or_404(db, Route, route_id, ENTITY)

        await route_audit.create_route_audit(
            db,
            route_id=route.id,
            status=AUDIT_DELETED,
            comment="Route deleted",
            user_name=user_name,
            changed_fields=[ALL_FIELDS],
            old_values=serialize_route(route),
        )

        slots = (await db.execute(
            select(WeeklyRouteDetail).where(WeeklyRouteDetail.route_id == route.id)
        )).scalars().all()
        for slot in slots:
            await weekly_route_audit.create_weekly_route_audit(
                db,
                slot.weekly_route_id,
                WEEK_ROUTE_REMOVED,
                f"Route {route.id} removed from day {slot.day_of_week} (route deleted)",
                user_name,
            )
            await db.delete(slot)

        await db.delete(route)

    log.info("route deleted: id=%s by=%s weekly_slots=%s", route_id, user_name, len(slots))


async def add_comment(db: AsyncSession, route_id: int, text: str, author: Optional[str] = None):
    if not text or not text.strip():
        raise ValidationError("Comment text is required")
    async with atomic(db):
        route = await get_or_404(db, Route, route_id, ENTITY)
        comment = await route_comment.create_route_comment(db, route, text, author)
    log.info("route comment added: route=%s author=%s", route_id, author)
    return comment
