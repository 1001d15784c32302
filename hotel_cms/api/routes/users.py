"""User management endpoints (super_admin only)."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hotel_cms.api.dependencies.common import get_bool_filter, get_user_service
from hotel_cms.middleware.auth import AuthContext, require_roles
from hotel_cms.models.user import ROLE_SUPER_ADMIN
from hotel_cms.schemas.base import api_response
from hotel_cms.schemas.user import UserCreate, UserPermissionsUpdate, UserUpdate
from hotel_cms.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

super_admin_only = require_roles(ROLE_SUPER_ADMIN)


@router.get("", dependencies=[Depends(super_admin_only)])
async def list_users(
    is_active: Optional[bool] = Depends(get_bool_filter),
    search: Optional[str] = Query(None, max_length=100),
    service: UserService = Depends(get_user_service),
):
    """List admin accounts; super_admins are never listed."""
    users = await service.list_users(is_active=is_active, search=search)
    return api_response({"users": [u.to_dict() for u in users]}, count=len(users))


@router.get("/{user_id}", dependencies=[Depends(super_admin_only)])
async def get_user(user_id: UUID, service: UserService = Depends(get_user_service)):
    user = await service.get_user(user_id)
    return api_response({"user": user.to_dict()})


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(super_admin_only)])
async def create_user(data: UserCreate, service: UserService = Depends(get_user_service)):
    user = await service.create_user(data)
    return api_response({"user": user.to_dict()}, message="User created successfully")


@router.put("/{user_id}", dependencies=[Depends(super_admin_only)])
async def update_user(user_id: UUID, data: UserUpdate, service: UserService = Depends(get_user_service)):
    user = await service.update_user(user_id, data)
    return api_response({"user": user.to_dict()}, message="User updated successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    context: AuthContext = Depends(super_admin_only),
    service: UserService = Depends(get_user_service),
):
    await service.delete_user(user_id, context.user_id)
    return api_response(message="User deleted successfully")


@router.patch("/{user_id}/permissions", dependencies=[Depends(super_admin_only)])
async def update_user_permissions(
    user_id: UUID,
    data: UserPermissionsUpdate,
    service: UserService = Depends(get_user_service),
):
    user = await service.update_permissions(user_id, data)
    return api_response({"user": user.to_dict()}, message="User permissions updated successfully")


@router.patch("/{user_id}/toggle-status", dependencies=[Depends(super_admin_only)])
async def toggle_user_status(user_id: UUID, service: UserService = Depends(get_user_service)):
    user = await service.toggle_status(user_id)
    state = "activated" if user.is_active else "deactivated"
    return api_response({"user": user.to_dict()}, message=f"User {state} successfully")
