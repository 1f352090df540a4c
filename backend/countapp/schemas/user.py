from datetime import datetime
from typing import Optional

from countapp.models.user import Role
from countapp.schemas.base import CamelModel


class UserCreate(CamelModel):
    name: Optional[str] = None
    user_id: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None
    company_code: Optional[str] = None


class UserUpdate(CamelModel):
    name: Optional[str] = None
    user_id: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None
    company_code: Optional[str] = None


class UserResponse(CamelModel):
    """User account as returned to clients; the password hash is never included"""
    id: str
    name: str
    user_id: str
    role: Role
    company_code: str
    created_at: datetime
    updated_at: Optional[datetime] = None
