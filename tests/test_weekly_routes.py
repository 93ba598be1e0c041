from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from fleetdesk.core.errors import NotFoundError, ValidationError
from fleetdesk.crud import route_audit, weekly_route_audit
from fleetdesk.models.weekly_route import WeeklyRoute, WeeklyRouteDetail
from fleetdesk.schemas.route import RouteCreate
from fleetdesk.schemas.weekly_route import WeeklyRouteAttach, WeeklyRouteCreate, WeeklyRouteUpdate
from fleetdesk.services import route_engine, weekly_routes


def make_route(run_db, driver_id, day=date(2024, 6, 10), **overrides):
    fields = dict(
        driver_id=driver_id, date=day, pickup_zip="60601", delivery_zip="90210", rate=Decimal("1000")
    )
    fields.update(overrides)
    return run_db(lambda db: route_engine.create_route(db, RouteCreate(**fields)))


def make_week(run_db, driver_id, **overrides):
    fields = dict(driver_id=driver_id, week_start_date=date(2024, 6, 10), user_name="ana")
    fields.update(overrides)
    return run_db(lambda db: weekly_routes.create_week(db, WeeklyRouteCreate(**fields)))


def audits(run_db, week_id):
    return run_db(lambda db: weekly_route_audit.get_weekly_route_audits(db, week_id))


def slot_count(run_db):
    async def _count(db):
        return (await db.execute(select(func.count(WeeklyRouteDetail.id)))).scalar()
    return run_db(_count)


def boom(*args, **kwargs):
    raise RuntimeError("audit store unavailable")


def test_create_defaults_end_date_and_dispatcher(run_db, driver):
    week = make_week(run_db, driver.id)
    assert week.week_end_date == date(2024, 6, 16)
    assert week.dispatcher_id == driver.dispatcher_id
    assert week.status == "active"
    assert [a.action for a in audits(run_db, week.id)] == ["created"]


def test_create_rejects_inverted_span(run_db, driver):
    with pytest.raises(ValidationError):
        make_week(run_db, driver.id, week_end_date=date(2024, 6, 9))


def test_create_rolls_back_when_audit_fails(run_db, driver, monkeypatch):
    monkeypatch.setattr(weekly_route_audit, "create_weekly_route_audit", boom)
    with pytest.raises(RuntimeError):
        make_week(run_db, driver.id)

    async def _count(db):
        return (await db.execute(select(func.count(WeeklyRoute.id)))).scalar()
    assert run_db(_count) == 0


def test_update_is_audited_only_when_something_changed(run_db, driver):
    week = make_week(run_db, driver.id, notes="Chicago lanes")

    run_db(lambda db: weekly_routes.update_week(db, week.id, WeeklyRouteUpdate(notes="Chicago lanes")))
    assert [a.action for a in audits(run_db, week.id)] == ["created"]

    updated = run_db(lambda db: weekly_routes.update_week(
        db, week.id, WeeklyRouteUpdate(notes="West coast", status="closed", user_name="bo")
    ))
    assert updated.notes == "West coast"
    latest = audits(run_db, week.id)[0]
    assert latest.action == "updated"
    assert latest.user_name == "bo"
    assert "notes" in latest.details and "status" in latest.details


def test_update_rolls_back_when_audit_fails(run_db, driver, monkeypatch):
    week = make_week(run_db, driver.id, notes="Chicago lanes")

    monkeypatch.setattr(weekly_route_audit, "create_weekly_route_audit", boom)
    with pytest.raises(RuntimeError):
        run_db(lambda db: weekly_routes.update_week(
            db, week.id, WeeklyRouteUpdate(notes="West coast", status="closed")
        ))
    monkeypatch.undo()

    kept = run_db(lambda db: weekly_routes.get_week(db, week.id))
    assert (kept.notes, kept.status) == ("Chicago lanes", "active")
    assert [a.action for a in audits(run_db, week.id)] == ["created"]


def test_update_missing_week(run_db):
    with pytest.raises(NotFoundError):
        run_db(lambda db: weekly_routes.update_week(db, 404, WeeklyRouteUpdate(notes="x")))


def test_attach_appends_sequence_and_detail_is_ordered(run_db, driver):
    week = make_week(run_db, driver.id)
    r1 = make_route(run_db, driver.id)
    r2 = make_route(run_db, driver.id)
    r3 = make_route(run_db, driver.id, day=date(2024, 6, 11), status="Loaded")

    d1 = run_db(lambda db: weekly_routes.attach_route(db, week.id, WeeklyRouteAttach(route_id=r1.id, day_of_week=0)))
    d2 = run_db(lambda db: weekly_routes.attach_route(db, week.id, WeeklyRouteAttach(route_id=r2.id, day_of_week=0)))
    run_db(lambda db: weekly_routes.attach_route(db, week.id, WeeklyRouteAttach(route_id=r3.id, day_of_week=1)))
    assert (d1.sequence_number, d2.sequence_number) == (1, 2)

    detail = run_db(lambda db: weekly_routes.get_week_detail(db, week.id))
    slots = [(s["day_of_week"], s["sequence_number"], s["route_id"]) for s in detail["routes"]]
    assert slots == [(0, 1, r1.id), (0, 2, r2.id), (1, 1, r3.id)]
    assert detail["routes"][2]["catalog_color"] == "#2E8B57"
    assert [a.action for a in detail["audit_history"]].count("route_added") == 3


def test_attach_validates_references(run_db, driver):
    week = make_week(run_db, driver.id)
    with pytest.raises(NotFoundError):
        run_db(lambda db: weekly_routes.attach_route(db, week.id, WeeklyRouteAttach(route_id=999, day_of_week=0)))

    route = make_route(run_db, driver.id)
    with pytest.raises(NotFoundError):
        run_db(lambda db: weekly_routes.attach_route(db, 999, WeeklyRouteAttach(route_id=route.id, day_of_week=0)))


def test_detach_records_route_and_day(run_db, driver):
    week = make_week(run_db, driver.id)
    route = make_route(run_db, driver.id)
    slot = run_db(lambda db: weekly_routes.attach_route(
        db, week.id, WeeklyRouteAttach(route_id=route.id, day_of_week=3)
    ))

    removed = run_db(lambda db: weekly_routes.detach_route(db, week.id, slot.id, "ana"))
    assert removed.route_id == route.id

    latest = audits(run_db, week.id)[0]
    assert latest.action == "route_removed"
    assert latest.details == f"Route {route.id} removed from day 3"


def test_attach_rolls_back_when_audit_fails(run_db, driver, monkeypatch):
    week = make_week(run_db, driver.id)
    route = make_route(run_db, driver.id)

    monkeypatch.setattr(weekly_route_audit, "create_weekly_route_audit", boom)
    with pytest.raises(RuntimeError):
        run_db(lambda db: weekly_routes.attach_route(
            db, week.id, WeeklyRouteAttach(route_id=route.id, day_of_week=0)
        ))
    assert slot_count(run_db) == 0


def test_detach_rolls_back_when_audit_fails(run_db, driver, monkeypatch):
    week = make_week(run_db, driver.id)
    route = make_route(run_db, driver.id)
    slot = run_db(lambda db: weekly_routes.attach_route(
        db, week.id, WeeklyRouteAttach(route_id=route.id, day_of_week=2)
    ))

    monkeypatch.setattr(weekly_route_audit, "create_weekly_route_audit", boom)
    with pytest.raises(RuntimeError):
        run_db(lambda db: weekly_routes.detach_route(db, week.id, slot.id, "ana"))
    monkeypatch.undo()

    assert slot_count(run_db) == 1
    assert audits(run_db, week.id)[0].action == "route_added"


def test_detach_requires_matching_week(run_db, driver):
    week = make_week(run_db, driver.id)
    other = make_week(run_db, driver.id, week_start_date=date(2024, 6, 17))
    route = make_route(run_db, driver.id)
    slot = run_db(lambda db: weekly_routes.attach_route(
        db, week.id, WeeklyRouteAttach(route_id=route.id, day_of_week=0)
    ))

    with pytest.raises(NotFoundError) as exc:
        run_db(lambda db: weekly_routes.detach_route(db, other.id, slot.id))
    assert exc.value.message == "Route detail not found"


def test_deleting_a_route_empties_its_slots(run_db, driver):
    week = make_week(run_db, driver.id)
    route = make_route(run_db, driver.id)
    run_db(lambda db: weekly_routes.attach_route(db, week.id, WeeklyRouteAttach(route_id=route.id, day_of_week=0)))

    run_db(lambda db: route_engine.delete_route(db, route.id, "ana"))

    assert slot_count(run_db) == 0
    assert audits(run_db, week.id)[0].action == "route_removed"


def test_route_delete_rolls_back_when_slot_audit_fails(run_db, driver, monkeypatch):
    week = make_week(run_db, driver.id)
    route = make_route(run_db, driver.id)
    run_db(lambda db: weekly_routes.attach_route(db, week.id, WeeklyRouteAttach(route_id=route.id, day_of_week=0)))

    monkeypatch.setattr(weekly_route_audit, "create_weekly_route_audit", boom)
    with pytest.raises(RuntimeError):
        run_db(lambda db: route_engine.delete_route(db, route.id, "ana"))
    monkeypatch.undo()

    assert run_db(lambda db: route_engine.get_route(db, route.id)).id == route.id
    assert slot_count(run_db) == 1
    route_audits = run_db(lambda db: route_audit.get_route_audits(db, route.id))
    assert [a.status for a in route_audits] == ["created"]


def test_list_weeks_filters(run_db, driver):
    make_week(run_db, driver.id)
    make_week(run_db, driver.id, week_start_date=date(2024, 6, 17))

    june = run_db(lambda db: weekly_routes.list_weeks(db, start_date=date(2024, 6, 1), end_date=date(2024, 6, 20)))
    assert [w.week_start_date for w in june] == [date(2024, 6, 10)]
    assert len(run_db(lambda db: weekly_routes.list_weeks(db, driver_id=driver.id))) == 2
    assert run_db(lambda db: weekly_routes.list_weeks(db, dispatcher_id=999)) == []


def test_week_grid(run_db, driver):
    make_route(run_db, driver.id, day=date(2024, 6, 10), sold_for=Decimal("700"))
    make_route(run_db, driver.id, day=date(2024, 6, 13))
    make_route(run_db, driver.id, day=date(2024, 6, 17))  # next week

    grid = run_db(lambda db: weekly_routes.week_grid(db, date(2024, 6, 12)))
    assert grid["week_start"] == date(2024, 6, 10)
    assert grid["week_end"] == date(2024, 6, 16)
    assert len(grid["days"]) == 7

    row = grid["drivers"][0]
    assert row["driver_name"] == "Jane Doe"
    assert row["dispatcher_name"] == "Sam Hill"
    assert len(row["days"]["2024-06-10"]) == 1
    assert len(row["days"]["2024-06-13"]) == 1
    assert row["days"]["2024-06-11"] == []
    assert row["earnings"].route_count == 2
    assert row["earnings"].total_earnings == Decimal("475.00")
    assert grid["totals"].gross == Decimal("2000.00")
