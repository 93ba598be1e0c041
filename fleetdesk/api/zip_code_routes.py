from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetdesk.core.constants import ZIP_PATTERN
from fleetdesk.core.errors import ValidationError
from fleetdesk.db import get_db
from fleetdesk.schemas.zip_code import LocationRead, MileageRead, MileageRequest, ZipCodeCreate
from fleetdesk.services import distance, zip_locator

router = APIRouter()


@router.get("/zip-codes/{zip_code}", response_model=LocationRead)
async def get_zip_code(zip_code: str, db: AsyncSession = Depends(get_db)):
    if not ZIP_PATTERN.match(zip_code):
        raise ValidationError("ZIP code must be 5 digits")
    return await zip_locator.resolve_zip(db, zip_code)


@router.post("/zip-codes", response_model=LocationRead, status_code=201)
async def add_zip_code(payload: ZipCodeCreate, db: AsyncSession = Depends(get_db)):
    """Record a ZIP the resolver does not know, or correct a cached one."""
    location = zip_locator.Location(
        zip_code=payload.zip_code,
        city=payload.city.strip(),
        state=payload.state.upper(),
        county=payload.county,
        lat=payload.lat,
        lng=payload.lng,
    )
    return await zip_locator.remember_zip(db, location)


@router.post("/calculate-mileage", response_model=MileageRead)
async def calculate_mileage(payload: MileageRequest, db: AsyncSession = Depends(get_db)):
    estimate = await distance.estimate_mileage(db, payload.pickup_zip, payload.delivery_zip)
    return {
        "pickup_zip": payload.pickup_zip,
        "delivery_zip": payload.delivery_zip,
        "mileage": estimate.miles,
        "method": estimate.method,
        "is_fallback": estimate.is_fallback,
    }
