"""Database models for the hotel website CMS."""

from .base import TimestampMixin
from .user import User
from .website import Website
from .contact_message import ContactMessage

__all__ = [
    "TimestampMixin",
    "User",
    "Website",
    "ContactMessage",
]
