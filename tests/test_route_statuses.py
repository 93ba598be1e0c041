import pytest

from fleetdesk.core.constants import DEFAULT_ROUTE_STATUSES
from fleetdesk.core.errors import ConflictError
from fleetdesk.crud import route_status
from fleetdesk.schemas.route_status import RouteStatusCreate, RouteStatusUpdate


def statuses(run_db):
    return run_db(route_status.get_statuses)


def by_name(run_db, name):
    return run_db(lambda db: route_status.get_status_by_name(db, name))


def test_seeded_catalog(run_db):
    rows = statuses(run_db)
    assert [s.name for s in rows] == [name for name, _ in DEFAULT_ROUTE_STATUSES]
    assert [s.name for s in rows if s.is_default] == ["Empty"]


def test_seeding_twice_adds_nothing(run_db):
    assert run_db(route_status.seed_default_statuses) == 0


def test_exactly_one_default_after_switching(run_db):
    a = by_name(run_db, "Loaded")
    b = by_name(run_db, "Service")
    run_db(lambda db: route_status.set_default_status(db, a.id))
    run_db(lambda db: route_status.set_default_status(db, b.id))

    defaults = [s for s in statuses(run_db) if s.is_default]
    assert [s.id for s in defaults] == [b.id]

    with pytest.raises(ConflictError):
        run_db(lambda db: route_status.delete_status(db, b.id))


def test_create_default_status_takes_the_flag(run_db):
    created = run_db(lambda db: route_status.create_status(
        db, RouteStatusCreate(name="Breakdown", color="#FF0000", is_default=True)
    ))
    assert created.sort_order == len(DEFAULT_ROUTE_STATUSES) + 1
    assert [s.name for s in statuses(run_db) if s.is_default] == ["Breakdown"]


def test_duplicate_name_conflicts(run_db):
    with pytest.raises(ConflictError):
        run_db(lambda db: route_status.create_status(db, RouteStatusCreate(name="Loaded", color="#123456")))


def test_default_cannot_be_unset_directly(run_db):
    empty = by_name(run_db, "Empty")
    with pytest.raises(ConflictError):
        run_db(lambda db: route_status.update_status(db, empty.id, RouteStatusUpdate(is_default=False)))


def test_delete_non_default(run_db):
    service = by_name(run_db, "Service")
    run_db(lambda db: route_status.delete_status(db, service.id))
    assert by_name(run_db, "Service") is None


def test_move_swaps_with_neighbour(run_db):
    service = by_name(run_db, "Service")
    reordered = run_db(lambda db: route_status.move_status(db, service.id, "up"))
    assert [s.name for s in reordered][:2] == ["Service", "Empty"]

    # already first: no-op
    reordered = run_db(lambda db: route_status.move_status(db, service.id, "up"))
    assert [s.name for s in reordered][:2] == ["Service", "Empty"]

    reordered = run_db(lambda db: route_status.move_status(db, service.id, "down"))
    assert [s.name for s in reordered][:2] == ["Empty", "Service"]
