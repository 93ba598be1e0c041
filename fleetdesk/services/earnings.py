"""Route financials. Pure functions over Decimal; only ``dispatcher_stats`` touches the store."""
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.models.dispatcher import Dispatcher
from fleetdesk.models.driver import Driver
from fleetdesk.models.route import Route

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def gross_difference(rate, sold_for) -> Decimal:
    """Rate minus sold-for; zero when the load was not sold on (no or zero sold-for)."""
    if not sold_for:
        return _cents(ZERO)
    return _cents(_money(rate) - _money(sold_for))


def percentage_income(sold_for, driver_percentage) -> Decimal:
    if not sold_for:
        return _cents(ZERO)
    return _cents(_money(sold_for) * _money(driver_percentage) / 100)


def total_earnings(rate, sold_for, driver_percentage) -> Decimal:
    return gross_difference(rate, sold_for) + percentage_income(sold_for, driver_percentage)


@dataclass
class EarningsSummary:
    route_count: int = 0
    gross: Decimal = ZERO
    gross_difference: Decimal = ZERO
    percentage_income: Decimal = ZERO
    total_earnings: Decimal = ZERO

    def add(self, other: "EarningsSummary") -> "EarningsSummary":
        return EarningsSummary(
            self.route_count + other.route_count,
            self.gross + other.gross,
            self.gross_difference + other.gross_difference,
            self.percentage_income + other.percentage_income,
            self.total_earnings + other.total_earnings,
        )


def summarize_routes(routes: Iterable[Route], driver_percentage) -> EarningsSummary:
    summary = EarningsSummary()
    for route in routes:
        summary.route_count += 1
        summary.gross += _cents(_money(route.rate))
        summary.gross_difference += gross_difference(route.rate, route.sold_for)
        summary.percentage_income += percentage_income(route.sold_for, driver_percentage)
    summary.total_earnings = summary.gross_difference + summary.percentage_income
    return summary


@dataclass
class DispatcherStats:
    dispatcher_id: int
    dispatcher_name: str
    route_count: int
    gross: Decimal
    gross_difference: Decimal
    percentage_income: Decimal
    total_earnings: Decimal


async def dispatcher_stats(
    db: AsyncSession, start_date: Optional[date] = None, end_date: Optional[date] = None
) -> list[DispatcherStats]:
    dispatchers = (await db.execute(
        select(Dispatcher).order_by(Dispatcher.last_name, Dispatcher.first_name)
    )).scalars().all()
    drivers = (await db.execute(select(Driver).where(Driver.dispatcher_id.is_not(None)))).scalars().all()

    query = select(Route).where(Route.driver_id.in_([d.id for d in drivers]))
    if start_date:
        query = query.where(Route.date >= start_date)
    if end_date:
        query = query.where(Route.date <= end_date)
    routes = (await db.execute(query)).scalars().all()

    routes_by_driver: dict[int, list[Route]] = {}
    for route in routes:
        routes_by_driver.setdefault(route.driver_id, []).append(route)

    stats = []
    for dispatcher in dispatchers:
        summary = EarningsSummary()
        for driver in drivers:
            if driver.dispatcher_id == dispatcher.id:
                summary = summary.add(summarize_routes(routes_by_driver.get(driver.id, []), driver.percentage))
        stats.append(DispatcherStats(
            dispatcher_id=dispatcher.id,
            dispatcher_name=dispatcher.full_name,
            route_count=summary.route_count,
            gross=summary.gross,
            gross_difference=summary.gross_difference,
            percentage_income=summary.percentage_income,
            total_earnings=summary.total_earnings,
        ))
    return stats


def rank_dispatchers(stats: list[DispatcherStats]) -> dict:
    """Top dispatcher per metric; ties keep the first in name order."""
    if not stats:
        return {"total_earnings": None, "gross_difference": None, "percentage_income": None}
    return {
        metric: max(stats, key=lambda s: getattr(s, metric))
        for metric in ("total_earnings", "gross_difference", "percentage_income")
    }
