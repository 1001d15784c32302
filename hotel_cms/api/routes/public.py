"""Unauthenticated endpoints used by the hotel front-ends."""

from fastapi import APIRouter, Depends, status

from hotel_cms.api.dependencies.common import get_contact_message_service, get_website_service
from hotel_cms.schemas.base import api_response
from hotel_cms.schemas.contact_message import ContactMessageCreate
from hotel_cms.services.contact_message_service import ContactMessageService
from hotel_cms.services.website_service import WebsiteService

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/website/{unique_id}")
async def get_public_website(unique_id: str, service: WebsiteService = Depends(get_website_service)):
    """Published content of an active website, looked up by its public id."""
    return api_response(await service.public_projection(unique_id))


@router.post("/website/{unique_id}/contact", status_code=status.HTTP_201_CREATED)
async def submit_contact_message(
    unique_id: str,
    data: ContactMessageCreate,
    service: ContactMessageService = Depends(get_contact_message_service),
):
    message = await service.submit(unique_id, data)
    return api_response({"contactMessage": {"id": str(message.id)}}, message="Message sent successfully")
