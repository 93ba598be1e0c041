from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DivisionCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    mc: Optional[str] = None
    dot: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None


class DivisionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    mc: Optional[str] = None
    dot: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None


class DivisionRead(DivisionCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
