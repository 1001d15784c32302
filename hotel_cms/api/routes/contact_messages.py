"""Contact message inbox of a website."""

from uuid import UUID

from fastapi import APIRouter, Depends

from hotel_cms.api.dependencies.common import get_contact_message_service, get_pagination_params
from hotel_cms.middleware.tenant import require_website_access
from hotel_cms.schemas.base import PaginationParams, api_response
from hotel_cms.services.contact_message_service import ContactMessageService

router = APIRouter(
    prefix="/websites/{website_id}/contact-messages",
    tags=["Contact messages"],
    dependencies=[Depends(require_website_access())],
)


@router.get("")
async def list_contact_messages(
    website_id: UUID,
    pagination: PaginationParams = Depends(get_pagination_params),
    service: ContactMessageService = Depends(get_contact_message_service),
):
    """Newest first, paginated with ``page`` and ``limit``."""
    messages, meta = await service.list_messages(website_id, pagination)
    return api_response({"messages": [m.to_dict() for m in messages]}, **meta)


@router.patch("/{message_id}/toggle-read")
async def toggle_message_read(
    website_id: UUID,
    message_id: UUID,
    service: ContactMessageService = Depends(get_contact_message_service),
):
    message = await service.toggle_read(website_id, message_id)
    state = "read" if message.is_read else "unread"
    return api_response({"message": message.to_dict()}, message=f"Message marked as {state}")


@router.delete("/{message_id}")
async def delete_contact_message(
    website_id: UUID,
    message_id: UUID,
    service: ContactMessageService = Depends(get_contact_message_service),
):
    await service.delete(website_id, message_id)
    return api_response(message="Message deleted successfully")
