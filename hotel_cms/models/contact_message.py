"""Contact messages posted by public visitors."""

import uuid
from typing import Any, Dict

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Text, Uuid

from .base import TimestampMixin, serialize_value
from hotel_cms.core.database import Base


class ContactMessage(Base, TimestampMixin):
    """
    Message sent through a website's public contact form.

    Kept outside the website aggregate: public writes never touch the
    website row and messages never appear in website reads.
    """

    __tablename__ = "contact_messages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    website_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("websites.id", ondelete="CASCADE"),
        nullable=False,
    )
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False, default="")
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_contact_messages_website_created", "website_id", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": serialize_value(self.id),
            "websiteId": serialize_value(self.website_id),
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "isRead": self.is_read,
            "createdAt": serialize_value(self.created_at),
            "updatedAt": serialize_value(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<ContactMessage(id={self.id}, website_id={self.website_id})>"
