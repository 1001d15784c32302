"""Website-level request schemas."""

from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from .base import BaseSchema


class WebsiteSettings(BaseSchema):
    language: str = "en"
    currency: str = "USD"
    timezone: str = "UTC"


class WebsiteSeo(BaseSchema):
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)


def _normalize_host(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


class WebsiteCreate(BaseSchema):
    """Create a website (super_admin only)."""

    name: str = Field(min_length=1, max_length=100)
    domain: str = Field(min_length=1, max_length=255)
    subdomain: Optional[str] = Field(None, max_length=255)
    theme: str = "default"
    settings: WebsiteSettings = Field(default_factory=WebsiteSettings)
    seo: WebsiteSeo = Field(default_factory=WebsiteSeo)

    @field_validator("domain", "subdomain")
    @classmethod
    def normalize_host(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_host(v)


class WebsiteUpdate(BaseSchema):
    """Partial update of website-level fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    domain: Optional[str] = Field(None, min_length=1, max_length=255)
    subdomain: Optional[str] = Field(None, max_length=255)
    theme: Optional[str] = None
    settings: Optional[WebsiteSettings] = None
    seo: Optional[WebsiteSeo] = None
    is_active: Optional[bool] = None
    hotel_info: Optional[Dict[str, Any]] = None

    @field_validator("domain", "subdomain")
    @classmethod
    def normalize_host(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_host(v)


class AssignAdminRequest(BaseSchema):
    """Assign an admin to a website; omit ``adminId`` to unassign."""

    admin_id: Optional[UUID] = None
