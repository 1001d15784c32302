"""Contact messages posted from public website forms."""

import logging
import math
import uuid
from typing import Any, Dict, List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.exceptions import NotFoundError
from hotel_cms.models.contact_message import ContactMessage
from hotel_cms.schemas.base import PaginationParams
from hotel_cms.schemas.contact_message import ContactMessageCreate
from hotel_cms.services.website_service import WebsiteService

logger = logging.getLogger(__name__)


class ContactMessageService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.websites = WebsiteService(db_session)

    async def submit(self, unique_id: str, data: ContactMessageCreate) -> ContactMessage:
        """
        Store a message for an active website, addressed by its public id.

        Raises:
            NotFoundError: If the website is missing or inactive
        """
        website = await self.websites.get_active_by_unique_id(unique_id)
        message = ContactMessage(
            website_id=website.id,
            email=data.email,
            phone=data.phone or "",
            message=data.message,
        )
        self.db.add(message)
        await self.db.commit()
        logger.info(f"Contact message {message.id} received for website {website.id}")
        return message

    async def list_messages(
        self, website_id: uuid.UUID, pagination: PaginationParams
    ) -> Tuple[List[ContactMessage], Dict[str, Any]]:
        """
        Newest-first page of a website's messages.

        Returns:
            The messages and the ``count``/``totalCount``/``page``/``totalPages`` metadata
        """
        website = await self.websites.get_website(website_id)

        total_count = await self.db.scalar(
            select(func.count(ContactMessage.id)).where(ContactMessage.website_id == website.id)
        )
        result = await self.db.execute(
            select(ContactMessage)
            .where(ContactMessage.website_id == website.id)
            .order_by(ContactMessage.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        messages = list(result.scalars().all())

        meta = {
            "count": len(messages),
            "totalCount": total_count or 0,
            "page": pagination.page,
            "totalPages": math.ceil((total_count or 0) / pagination.limit),
        }
        return messages, meta

    async def _get(self, website_id: uuid.UUID, message_id: uuid.UUID) -> ContactMessage:
        result = await self.db.execute(
            select(ContactMessage).where(
                ContactMessage.id == message_id,
                ContactMessage.website_id == website_id,
            )
        )
        message = result.scalar_one_or_none()
        if message is None:
            raise NotFoundError("Message not found")
        return message

    async def toggle_read(self, website_id: uuid.UUID, message_id: uuid.UUID) -> ContactMessage:
        message = await self._get(website_id, message_id)
        message.is_read = not message.is_read
        await self.db.commit()
        return message

    async def delete(self, website_id: uuid.UUID, message_id: uuid.UUID) -> None:
        message = await self._get(website_id, message_id)
        await self.db.delete(message)
        await self.db.commit()
        logger.info(f"Deleted contact message {message_id}")
