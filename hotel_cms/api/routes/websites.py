"""Website lifecycle endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from hotel_cms.api.dependencies.common import get_website_service
from hotel_cms.middleware.auth import AuthContext, require_roles
from hotel_cms.middleware.tenant import require_website_access
from hotel_cms.models.user import ROLE_ADMIN, ROLE_SUPER_ADMIN
from hotel_cms.schemas.base import api_response
from hotel_cms.schemas.website import AssignAdminRequest, WebsiteCreate, WebsiteUpdate
from hotel_cms.services.website_service import WebsiteService

router = APIRouter(prefix="/websites", tags=["Websites"])

super_admin_only = require_roles(ROLE_SUPER_ADMIN)
scoped = require_website_access(ROLE_SUPER_ADMIN, ROLE_ADMIN)


@router.get("")
async def list_websites(
    context: AuthContext = Depends(require_roles(ROLE_SUPER_ADMIN, ROLE_ADMIN)),
    service: WebsiteService = Depends(get_website_service),
):
    """All websites for a super_admin; an admin only sees their own."""
    websites = await service.list_websites(context.user)
    return api_response(
        {"websites": [await service.serialize(w) for w in websites]},
        count=len(websites),
    )


@router.get("/{website_id}", dependencies=[Depends(scoped)])
async def get_website(website_id: UUID, service: WebsiteService = Depends(get_website_service)):
    website = await service.get_website(website_id)
    return api_response({"website": await service.serialize(website)})


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(super_admin_only)])
async def create_website(data: WebsiteCreate, service: WebsiteService = Depends(get_website_service)):
    website = await service.create_website(data)
    return api_response({"website": await service.serialize(website)}, message="Website created successfully")


@router.put("/{website_id}", dependencies=[Depends(scoped)])
async def update_website(
    website_id: UUID,
    data: WebsiteUpdate,
    service: WebsiteService = Depends(get_website_service),
):
    website = await service.update_website(website_id, data)
    return api_response({"website": await service.serialize(website)}, message="Website updated successfully")


@router.delete("/{website_id}", dependencies=[Depends(super_admin_only)])
async def delete_website(website_id: UUID, service: WebsiteService = Depends(get_website_service)):
    await service.delete_website(website_id)
    return api_response(message="Website deleted successfully")


@router.post("/{website_id}/switch", dependencies=[Depends(scoped)])
async def switch_website(website_id: UUID, service: WebsiteService = Depends(get_website_service)):
    website = await service.get_website(website_id)
    return api_response({"website": await service.serialize(website)}, message="Website switched successfully")


@router.patch("/{website_id}/assign-admin", dependencies=[Depends(super_admin_only)])
async def assign_admin(
    website_id: UUID,
    data: AssignAdminRequest,
    service: WebsiteService = Depends(get_website_service),
):
    website = await service.assign_admin(website_id, data.admin_id)
    message = "Admin assigned successfully" if data.admin_id else "Admin removed successfully"
    return api_response({"website": await service.serialize(website)}, message=message)
