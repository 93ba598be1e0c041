from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from fleetdesk.core.constants import HEX_COLOR_PATTERN

HEX_COLOR = HEX_COLOR_PATTERN.pattern


class RouteStatusCreate(BaseModel):
    name: str = Field(min_length=1)
    color: str = Field(pattern=HEX_COLOR)
    is_default: bool = False
    sort_order: Optional[int] = None  # appended to the end when omitted


class RouteStatusUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    is_default: Optional[bool] = None
    sort_order: Optional[int] = None


class RouteStatusMove(BaseModel):
    direction: Literal["up", "down"]


class RouteStatusRead(BaseModel):
    id: int
    name: str
    color: str
    is_default: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
