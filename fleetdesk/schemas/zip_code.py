from typing import Optional

from pydantic import BaseModel, Field

ZIP = r"^\d{5}$"


class ZipCodeCreate(BaseModel):
    zip_code: str = Field(pattern=ZIP)
    city: str = Field(min_length=1)
    state: str = Field(min_length=2, max_length=2)
    county: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class LocationRead(BaseModel):
    zip_code: str
    city: Optional[str] = None
    state: Optional[str] = None
    county: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    class Config:
        from_attributes = True


class MileageRequest(BaseModel):
    pickup_zip: str = Field(pattern=ZIP)
    delivery_zip: str = Field(pattern=ZIP)


class MileageRead(BaseModel):
    pickup_zip: str
    delivery_zip: str
    mileage: int
    method: str
    is_fallback: bool
