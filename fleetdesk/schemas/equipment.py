from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ---------- Trucks ----------
class TruckCreate(BaseModel):
    number: str = Field(min_length=1)
    category: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    vin: Optional[str] = None
    license_plate: Optional[str] = None


class TruckUpdate(BaseModel):
    number: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    vin: Optional[str] = None
    license_plate: Optional[str] = None


class TruckRead(TruckCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------- Trailers ----------
class TrailerCreate(BaseModel):
    number: str = Field(min_length=1)
    category: Optional[str] = None
    type: Optional[str] = None
    length: Optional[str] = None
    vin: Optional[str] = None
    license_plate: Optional[str] = None


class TrailerUpdate(BaseModel):
    number: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    type: Optional[str] = None
    length: Optional[str] = None
    vin: Optional[str] = None
    license_plate: Optional[str] = None


class TrailerRead(TrailerCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
