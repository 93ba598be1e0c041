from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


# ---------- Users ----------
class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    extension: Optional[str] = None
    group: Optional[str] = None
    permissions: List[str] = []
    is_active: bool = True


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    extension: Optional[str] = None
    group: Optional[str] = None
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    extension: Optional[str] = None
    group: Optional[str] = None
    permissions: List[str] = []
    is_active: bool
    deactivated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------- Section permissions ----------
class UserPermissionCreate(BaseModel):
    user_id: int
    section: str = Field(min_length=1)
    can_read: bool = True
    can_write: bool = False


class UserPermissionUpdate(BaseModel):
    user_id: Optional[int] = None
    section: Optional[str] = Field(default=None, min_length=1)
    can_read: Optional[bool] = None
    can_write: Optional[bool] = None


class UserPermissionRead(UserPermissionCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
