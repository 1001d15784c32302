"""Public contact form schema."""

from typing import Optional

from pydantic import Field

from .auth import LowercaseEmail
from .base import BaseSchema


class ContactMessageCreate(BaseSchema):
    email: LowercaseEmail
    phone: Optional[str] = Field("", max_length=50)
    message: str = Field(..., min_length=1, max_length=5000)
