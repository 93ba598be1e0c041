"""
ZIP code resolution.

Lookups hit the persisted ``zip_codes`` cache first and fall back to a small
embedded table of major ZIP codes. Embedded hits are written back to the cache
on a separate session, so a failed write never disturbs the caller's
transaction and never fails the lookup.
"""
from dataclasses import asdict, dataclass
from typing import Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.errors import ZipNotFoundError
from fleetdesk.models.zip_code import ZipCode

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    zip_code: str
    city: Optional[str] = None
    state: Optional[str] = None
    county: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None


REFERENCE_ZIPS = {
    "10001": Location("10001", "New York", "NY", "New York County", 40.7501, -73.9970),
    "90210": Location("90210", "Beverly Hills", "CA", "Los Angeles County", 34.0901, -118.4065),
    "90001": Location("90001", "Los Angeles", "CA", "Los Angeles County", 33.9731, -118.2479),
    "94102": Location("94102", "San Francisco", "CA", "San Francisco County", 37.7793, -122.4193),
    "60601": Location("60601", "Chicago", "IL", "Cook County", 41.8855, -87.6217),
    "75001": Location("75001", "Addison", "TX", "Dallas County", 32.9617, -96.8302),
    "77001": Location("77001", "Houston", "TX", "Harris County", 29.7604, -95.3698),
    "33101": Location("33101", "Miami", "FL", "Miami-Dade County", 25.7751, -80.2105),
    "20001": Location("20001", "Washington", "DC", "District of Columbia", 38.9121, -77.0147),
    "02108": Location("02108", "Boston", "MA", "Suffolk County", 42.3588, -71.0638),
    "80201": Location("80201", "Denver", "CO", "Denver County", 39.7392, -104.9847),
    "98101": Location("98101", "Seattle", "WA", "King County", 47.6101, -122.3421),
    "30301": Location("30301", "Atlanta", "GA", "Fulton County", 33.7490, -84.3880),
    "07102": Location("07102", "Newark", "NJ", "Essex County", 40.7357, -74.1724),
    "19102": Location("19102", "Philadelphia", "PA", "Philadelphia County", 39.9526, -75.1652),
    "89101": Location("89101", "Las Vegas", "NV", "Clark County", 36.1716, -115.1391),
    "85001": Location("85001", "Phoenix", "AZ", "Maricopa County", 33.4484, -112.0740),
    "97201": Location("97201", "Portland", "OR", "Multnomah County", 45.5075, -122.6899),
    "73102": Location("73102", "Oklahoma City", "OK", "Oklahoma County", 35.4707, -97.5190),
    "70112": Location("70112", "New Orleans", "LA", "Orleans Parish", 29.9569, -90.0771),
    "87102": Location("87102", "Albuquerque", "NM", "Bernalillo County", 35.0811, -106.6473),
}


def _from_row(row: ZipCode) -> Location:
    return Location(row.zip_code, row.city, row.state, row.county, row.lat, row.lng)


async def get_cached(db: AsyncSession, zip_code: str) -> Optional[Location]:
    result = await db.execute(select(ZipCode).where(ZipCode.zip_code == zip_code))
    row = result.scalar_one_or_none()
    return _from_row(row) if row else None


async def resolve_zip(db: AsyncSession, zip_code: str) -> Location:
    """Return the location of ``zip_code`` or raise ``ZipNotFoundError``."""
    cached = await get_cached(db, zip_code)
    if cached:
        return cached

    reference = REFERENCE_ZIPS.get(zip_code)
    if reference is None:
        raise ZipNotFoundError(zip_code)

    try:
        await remember_zip(db, reference)
    except SQLAlchemyError as exc:
        log.warning("zip cache write-through failed: zip=%s error=%s", zip_code, exc)
    return reference


async def try_resolve_zip(db: AsyncSession, zip_code: str) -> Optional[Location]:
    try:
        return await resolve_zip(db, zip_code)
    except ZipNotFoundError:
        return None


async def remember_zip(db: AsyncSession, location: Location) -> Location:
    """Insert or update a cache row, in its own short transaction.

    Two requests caching the same new ZIP race on the unique constraint; the
    loser updates the winner's row instead.
    """
    values = {k: v for k, v in asdict(location).items() if k != "zip_code"}
    async with AsyncSession(bind=db.bind, expire_on_commit=False) as cache_db:
        existing = await cache_db.execute(
            select(ZipCode.id).where(ZipCode.zip_code == location.zip_code)
        )
        if existing.scalar_one_or_none() is None:
            cache_db.add(ZipCode(zip_code=location.zip_code, **values))
            try:
                await cache_db.commit()
                log.info("zip cached: zip=%s city=%s state=%s", location.zip_code, location.city, location.state)
                return location
            except IntegrityError:
                await cache_db.rollback()
                log.info("zip cache insert raced, updating instead: zip=%s", location.zip_code)

        await cache_db.execute(
            update(ZipCode).where(ZipCode.zip_code == location.zip_code).values(**values)
        )
        await cache_db.commit()
    return location
