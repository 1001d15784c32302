"""User management request schemas (super_admin only)."""

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import Field

from .auth import LowercaseEmail
from .base import BaseSchema


class UserCreate(BaseSchema):
    email: LowercaseEmail
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    role: Optional[Literal["admin"]] = None
    website_id: Optional[UUID] = None
    website_access: List[UUID] = Field(default_factory=list)
    is_active: bool = True


class UserUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    website_id: Optional[UUID] = None
    website_access: Optional[List[UUID]] = None
    is_active: Optional[bool] = None
    avatar: Optional[str] = None


class UserPermissionsUpdate(BaseSchema):
    website_access: Optional[List[UUID]] = None
    role: Optional[Literal["super_admin", "admin"]] = None
