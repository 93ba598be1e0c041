"""
Approximate road mileage between two ZIP codes.

Tiers, first match wins:
  1. same state          -> ZIP-digit delta scaled into [10, 200]
  2. different states    -> known lane table, else ZIP-digit delta in [100, 2000]
  3. no state for a side -> Haversine * 1.15 when both coordinates are known
  4. nothing known       -> fixed fallback, flagged as such via ``method``
"""
from dataclasses import dataclass
from typing import Optional
import logging
import math

from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.config import get_settings
from fleetdesk.core.constants import (
    MILEAGE_FALLBACK, MILEAGE_HAVERSINE, MILEAGE_SAME_STATE, MILEAGE_STATE_PAIR, MILEAGE_ZIP_DELTA
)
from fleetdesk.services.zip_locator import REFERENCE_ZIPS, Location, try_resolve_zip

log = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3958.8
ROAD_FACTOR = 1.15

# Common lanes, miles. Looked up in either direction.
STATE_PAIR_MILES = {
    ("NY", "NJ"): 50,
    ("NY", "PA"): 150,
    ("NY", "CT"): 80,
    ("NY", "MA"): 180,
    ("CA", "NV"): 200,
    ("CA", "OR"): 300,
    ("CA", "AZ"): 400,
    ("TX", "OK"): 250,
    ("TX", "LA"): 300,
    ("TX", "NM"): 500,
}


@dataclass(frozen=True)
class DistanceEstimate:
    miles: int
    method: str

    @property
    def is_fallback(self) -> bool:
        return self.method == MILEAGE_FALLBACK


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _zip_delta(origin_zip: str, dest_zip: str) -> int:
    return abs(int(origin_zip) - int(dest_zip))


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def state_pair_miles(origin_state: str, dest_state: str) -> Optional[int]:
    return STATE_PAIR_MILES.get((origin_state, dest_state)) or STATE_PAIR_MILES.get((dest_state, origin_state))


def _coordinates(zip_code: str, location: Optional[Location]) -> Optional[Location]:
    if location is not None and location.has_coordinates:
        return location
    return REFERENCE_ZIPS.get(zip_code)


def estimate_distance(
    origin_zip: str,
    dest_zip: str,
    origin: Optional[Location] = None,
    destination: Optional[Location] = None,
) -> DistanceEstimate:
    origin_state = origin.state if origin else None
    dest_state = destination.state if destination else None

    if origin_state and dest_state:
        delta = _zip_delta(origin_zip, dest_zip)
        if origin_state == dest_state:
            return DistanceEstimate(_clamp(_round_half_up(delta / 100) * 5, 10, 200), MILEAGE_SAME_STATE)
        known = state_pair_miles(origin_state, dest_state)
        if known is not None:
            return DistanceEstimate(known, MILEAGE_STATE_PAIR)
        return DistanceEstimate(_clamp(_round_half_up(delta / 50) * 10, 100, 2000), MILEAGE_ZIP_DELTA)

    a = _coordinates(origin_zip, origin)
    b = _coordinates(dest_zip, destination)
    if a is not None and b is not None:
        miles = haversine_miles(a.lat, a.lng, b.lat, b.lng) * ROAD_FACTOR
        return DistanceEstimate(_round_half_up(miles), MILEAGE_HAVERSINE)

    fallback = get_settings().fallback_mileage
    log.warning("no distance data for %s -> %s, using fallback of %s miles", origin_zip, dest_zip, fallback)
    return DistanceEstimate(fallback, MILEAGE_FALLBACK)


async def estimate_mileage(db: AsyncSession, origin_zip: str, dest_zip: str) -> DistanceEstimate:
    origin = await try_resolve_zip(db, origin_zip)
    destination = await try_resolve_zip(db, dest_zip)
    return estimate_distance(origin_zip, dest_zip, origin, destination)
