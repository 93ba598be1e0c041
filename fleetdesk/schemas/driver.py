from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from fleetdesk.schemas.common import Money


class DriverBase(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    count: int = 0
    percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    dispatcher_id: Optional[int] = None
    truck: Optional[str] = None
    trailer: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    category: Optional[str] = None


class DriverCreate(DriverBase):
    pass


class DriverUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    count: Optional[int] = None
    percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    dispatcher_id: Optional[int] = None
    truck: Optional[str] = None
    trailer: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    category: Optional[str] = None


class DriverRead(DriverBase):
    id: int
    percentage: Money
    email: Optional[str] = None
    dispatcher_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
