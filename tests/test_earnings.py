from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from fleetdesk.models.dispatcher import Dispatcher
from fleetdesk.models.driver import Driver
from fleetdesk.models.route import Route
from fleetdesk.services.earnings import (
    dispatcher_stats,
    gross_difference,
    percentage_income,
    rank_dispatchers,
    summarize_routes,
    total_earnings,
)


def test_sold_on_load():
    assert gross_difference(Decimal("1000"), Decimal("700")) == Decimal("300.00")
    assert percentage_income(Decimal("700"), Decimal("25")) == Decimal("175.00")
    assert total_earnings(Decimal("1000"), Decimal("700"), Decimal("25")) == Decimal("475.00")


def test_load_not_sold_on_earns_nothing_extra():
    assert gross_difference(Decimal("1000"), None) == Decimal("0")
    assert percentage_income(None, Decimal("25")) == Decimal("0")
    assert total_earnings(Decimal("1000"), None, Decimal("25")) == Decimal("0")


def test_no_float_drift():
    # 0.1 + 0.2 style sums stay exact
    routes = [SimpleNamespace(rate=Decimal("0.10"), sold_for=Decimal("0.05")) for _ in range(3)]
    summary = summarize_routes(routes, Decimal("10"))
    assert summary.gross == Decimal("0.30")
    assert summary.gross_difference == Decimal("0.15")


def test_percentage_income_rounds_half_up_to_cents():
    assert percentage_income(Decimal("0.50"), Decimal("25")) == Decimal("0.13")


def test_summarize_routes():
    routes = [
        SimpleNamespace(rate=Decimal("1000"), sold_for=Decimal("700")),
        SimpleNamespace(rate=Decimal("1500"), sold_for=None),
    ]
    summary = summarize_routes(routes, Decimal("25"))
    assert summary.route_count == 2
    assert summary.gross == Decimal("2500.00")
    assert summary.gross_difference == Decimal("300.00")
    assert summary.percentage_income == Decimal("175.00")
    assert summary.total_earnings == Decimal("475.00")


def test_dispatcher_rankings(run_db):
    async def _seed(db):
        ann = Dispatcher(first_name="Ann", last_name="Avery")
        bob = Dispatcher(first_name="Bob", last_name="Brown")
        db.add_all([ann, bob])
        await db.flush()
        d1 = Driver(first_name="D", last_name="One", percentage=Decimal("25"), dispatcher_id=ann.id)
        d2 = Driver(first_name="D", last_name="Two", percentage=Decimal("50"), dispatcher_id=bob.id)
        db.add_all([d1, d2])
        await db.flush()

        def route(driver, day, rate, sold_for):
            return Route(
                driver_id=driver.id, date=day, pickup_zip="60601", delivery_zip="90210",
                rate=Decimal(rate), sold_for=Decimal(sold_for) if sold_for else None, status="Loaded",
            )

        db.add_all([
            route(d1, date(2024, 6, 10), "1000", "700"),   # diff 300, pct 175
            route(d2, date(2024, 6, 11), "1000", "900"),   # diff 100, pct 450
            route(d2, date(2024, 5, 1), "5000", "1000"),   # outside the range
        ])
        await db.commit()

    run_db(_seed)
    stats = run_db(lambda db: dispatcher_stats(db, date(2024, 6, 10), date(2024, 6, 16)))
    by_name = {s.dispatcher_name: s for s in stats}
    assert by_name["Ann Avery"].total_earnings == Decimal("475.00")
    assert by_name["Bob Brown"].total_earnings == Decimal("550.00")
    assert by_name["Bob Brown"].route_count == 1

    top = rank_dispatchers(stats)
    assert top["total_earnings"].dispatcher_name == "Bob Brown"
    assert top["gross_difference"].dispatcher_name == "Ann Avery"
    assert top["percentage_income"].dispatcher_name == "Bob Brown"


def test_rankings_without_dispatchers():
    assert rank_dispatchers([]) == {"total_earnings": None, "gross_difference": None, "percentage_income": None}
