"""
Weekly route aggregator.

A weekly route is a per-driver container for one calendar week; its detail
rows place existing routes into (day_of_week, sequence_number) slots.
Every write records a weekly route audit row in the same transaction.
Updates are audited only when a field actually changed, the same policy
routes follow.
"""
from datetime import date
from typing import Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fleetdesk.core.constants import WEEK_CREATED, WEEK_ROUTE_ADDED, WEEK_ROUTE_REMOVED, WEEK_UPDATED
from fleetdesk.core.errors import NotFoundError, ValidationError
from fleetdesk.crud import route_status, weekly_route_audit
from fleetdesk.crud.common import apply_updates, atomic, get_or_404
from fleetdesk.models.dispatcher import Dispatcher
from fleetdesk.models.division import Division
from fleetdesk.models.driver import Driver
from fleetdesk.models.route import Route
from fleetdesk.models.weekly_route import WeeklyRoute, WeeklyRouteDetail
from fleetdesk.schemas.weekly_route import WeeklyRouteAttach, WeeklyRouteCreate, WeeklyRouteUpdate
from fleetdesk.services.earnings import EarningsSummary, summarize_routes
from fleetdesk.utils.week import default_week_end, get_week_label, week_span

log = logging.getLogger(__name__)

ENTITY = "Weekly route"


async def _check_references(db: AsyncSession, driver_id, division_id, dispatcher_id):
    if await db.get(Driver, driver_id) is None:
        raise NotFoundError("Driver")
    if division_id is not None and await db.get(Division, division_id) is None:
        raise NotFoundError("Division")
    if dispatcher_id is not None and await db.get(Dispatcher, dispatcher_id) is None:
        raise NotFoundError("Dispatcher")


def _check_span(start: date, end: date):
    if end < start:
        raise ValidationError("week_end_date must not be before week_start_date")


async def list_weeks(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    driver_id: Optional[int] = None,
    division_id: Optional[int] = None,
    dispatcher_id: Optional[int] = None,
):
    query = select(WeeklyRoute)
    if start_date:
        query = query.where(WeeklyRoute.week_start_date >= start_date)
    if end_date:
        query = query.where(WeeklyRoute.week_end_date <= end_date)
    if driver_id is not None:
        query = query.where(WeeklyRoute.driver_id == driver_id)
    if division_id is not None:
        query = query.where(WeeklyRoute.division_id == division_id)
    if dispatcher_id is not None:
        query = query.where(WeeklyRoute.dispatcher_id == dispatcher_id)
    result = await db.execute(
        query.order_by(WeeklyRoute.week_start_date.desc(), WeeklyRoute.id.desc())
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def get_week(db: AsyncSession, week_id: int) -> WeeklyRoute:
    result = await db.execute(
        select(WeeklyRoute)
        .options(selectinload(WeeklyRoute.details).selectinload(WeeklyRouteDetail.route))
        .where(WeeklyRoute.id == week_id)
        .execution_options(populate_existing=True)
    )
    week = result.scalar_one_or_none()
    if week is None:
        raise NotFoundError(ENTITY)
    return week


async def get_week_detail(db: AsyncSession, week_id: int) -> dict:
    """The week, its slots in (day, sequence) order with the routes they hold,
    and its audit history newest first."""
    week = await get_week(db, week_id)
    colors = {s.name: s.color for s in await route_status.get_statuses(db)}
    slots = [
        {
            "id": detail.id,
            "weekly_route_id": detail.weekly_route_id,
            "route_id": detail.route_id,
            "day_of_week": detail.day_of_week,
            "sequence_number": detail.sequence_number,
            "created_at": detail.created_at,
            "route": detail.route,
            "catalog_color": colors.get(detail.route.status),
        }
        for detail in week.details
    ]
    audits = await weekly_route_audit.get_weekly_route_audits(db, week_id)
    return {"week": week, "routes": slots, "audit_history": audits}


async def create_week(db: AsyncSession, payload: WeeklyRouteCreate) -> WeeklyRoute:
    end = payload.week_end_date or default_week_end(payload.week_start_date)
    _check_span(payload.week_start_date, end)

    async with atomic(db):
        await _check_references(db, payload.driver_id, payload.division_id, payload.dispatcher_id)
        dispatcher_id = payload.dispatcher_id
        if dispatcher_id is None:
            driver = await db.get(Driver, payload.driver_id)
            dispatcher_id = driver.dispatcher_id

        week = WeeklyRoute(
            driver_id=payload.driver_id,
            division_id=payload.division_id,
            dispatcher_id=dispatcher_id,
            week_start_date=payload.week_start_date,
            week_end_date=end,
            status=payload.status or "active",
            notes=payload.notes,
        )
        db.add(week)
        await db.flush()
        await weekly_route_audit.create_weekly_route_audit(
            db, week.id, WEEK_CREATED, "Weekly route created", payload.user_name
        )

    log.info("weekly route created: id=%s driver=%s week=%s", week.id, week.driver_id, week.week_start_date)
    return await get_week(db, week.id)


async def update_week(db: AsyncSession, week_id: int, payload: WeeklyRouteUpdate) -> WeeklyRoute:
    updates = payload.model_dump(exclude_unset=True, exclude={"user_name"})
    for name in ("driver_id", "week_start_date", "week_end_date", "status"):
        if name in updates and updates[name] is None:
            raise ValidationError(f"{name} cannot be null")

    async with atomic(db):
        week = await get_or_404(db, WeeklyRoute, week_id, ENTITY)
        _check_span(
            updates.get("week_start_date", week.week_start_date),
            updates.get("week_end_date", week.week_end_date),
        )
        if {"driver_id", "division_id", "dispatcher_id"} & updates.keys():
            await _check_references(
                db,
                updates.get("driver_id", week.driver_id),
                updates.get("division_id", week.division_id),
                updates.get("dispatcher_id", week.dispatcher_id),
            )

        changed = apply_updates(week, updates)
        if changed:
            await db.flush()
            await weekly_route_audit.create_weekly_route_audit(
                db, week.id, WEEK_UPDATED, f"Weekly route updated: {', '.join(changed)}", payload.user_name
            )

    if changed:
        log.info("weekly route updated: id=%s fields=%s", week_id, changed)
    return await get_week(db, week_id)


async def attach_route(db: AsyncSession, week_id: int, payload: WeeklyRouteAttach) -> WeeklyRouteDetail:
    if not 0 <= payload.day_of_week <= 6:
        raise ValidationError("day_of_week must be between 0 (Monday) and 6 (Sunday)")

    async with atomic(db):
        await get_or_404(db, WeeklyRoute, week_id, ENTITY)
        await get_or_404(db, Route, payload.route_id, "Route")

        sequence = payload.sequence_number
        if sequence is None:
            last = (await db.execute(
                select(func.max(WeeklyRouteDetail.sequence_number)).where(
                    WeeklyRouteDetail.weekly_route_id == week_id,
                    WeeklyRouteDetail.day_of_week == payload.day_of_week,
                )
            )).scalar()
            sequence = (last or 0) + 1

        detail = WeeklyRouteDetail(
            weekly_route_id=week_id,
            route_id=payload.route_id,
            day_of_week=payload.day_of_week,
            sequence_number=sequence,
        )
        db.add(detail)
        await db.flush()
        await weekly_route_audit.create_weekly_route_audit(
            db,
            week_id,
            WEEK_ROUTE_ADDED,
            f"Route {payload.route_id} added to day {payload.day_of_week}",
            payload.user_name,
        )

    log.info("route %s attached to weekly route %s: day=%s seq=%s", payload.route_id, week_id, payload.day_of_week, sequence)
    return detail


async def detach_route(
    db: AsyncSession, week_id: int, detail_id: int, user_name: Optional[str] = None
) -> WeeklyRouteDetail:
    async with atomic(db):
        result = await db.execute(
            select(WeeklyRouteDetail).where(
                WeeklyRouteDetail.id == detail_id,
                WeeklyRouteDetail.weekly_route_id == week_id,
            )
        )
        detail = result.scalar_one_or_none()
        if detail is None:
            raise NotFoundError("Route detail")
        await db.delete(detail)
        await weekly_route_audit.create_weekly_route_audit(
            db,
            week_id,
            WEEK_ROUTE_REMOVED,
            f"Route {detail.route_id} removed from day {detail.day_of_week}",
            user_name,
        )

    log.info("route %s detached from weekly route %s", detail.route_id, week_id)
    return detail


async def week_grid(db: AsyncSession, any_day: date) -> dict:
    """Dispatch board for one week: every driver, their routes per day and
    their earnings for the week."""
    start, days, end = week_span(any_day)
    day_keys = [d.isoformat() for d in days]

    drivers = (await db.execute(
        select(Driver).order_by(Driver.count, Driver.last_name, Driver.first_name)
    )).scalars().all()
    routes = (await db.execute(
        select(Route)
        .where(Route.date >= start, Route.date <= end)
        .order_by(Route.date, Route.id)
    )).scalars().all()

    by_driver: dict[int, list[Route]] = {}
    for route in routes:
        by_driver.setdefault(route.driver_id, []).append(route)

    rows = []
    totals = EarningsSummary()
    for driver in drivers:
        driver_routes = by_driver.get(driver.id, [])
        cells = {key: [] for key in day_keys}
        for route in driver_routes:
            cells[route.date.isoformat()].append(route)
        earnings = summarize_routes(driver_routes, driver.percentage)
        totals = totals.add(earnings)
        rows.append({
            "driver_id": driver.id,
            "driver_name": driver.full_name,
            "dispatcher_name": driver.dispatcher_name,
            "days": cells,
            "earnings": earnings,
        })

    return {
        "week_start": start,
        "week_end": end,
        "label": get_week_label(start),
        "days": days,
        "drivers": rows,
        "totals": totals,
    }
