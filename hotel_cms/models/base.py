"""Base model classes and mixins."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, DateTime


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def new_embedded_id() -> str:
    """Identifier for a sub-document embedded in a website."""
    return uuid.uuid4().hex


def serialize_value(value: Any) -> Any:
    """Convert column values into JSON-friendly primitives."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class TimestampMixin:
    """Mixin for adding created_at and updated_at timestamps."""

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Record creation timestamp",
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Record last update timestamp",
    )
