"""Common FastAPI dependencies."""

from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.database import get_db_session
from hotel_cms.schemas.base import PaginationParams
from hotel_cms.services.auth_service import AuthService
from hotel_cms.services.contact_message_service import ContactMessageService
from hotel_cms.services.content_service import ContentService
from hotel_cms.services.file_storage import FileStorage, get_file_storage
from hotel_cms.services.token_service import TokenService, get_token_service
from hotel_cms.services.user_service import UserService
from hotel_cms.services.website_service import WebsiteService


def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    """Get pagination parameters from query string."""
    return PaginationParams(page=page, limit=limit)


def get_website_service(
    db: AsyncSession = Depends(get_db_session),
    files: FileStorage = Depends(get_file_storage),
) -> WebsiteService:
    return WebsiteService(db, files)


def get_content_service(
    db: AsyncSession = Depends(get_db_session),
    files: FileStorage = Depends(get_file_storage),
) -> ContentService:
    return ContentService(db, files)


def get_contact_message_service(db: AsyncSession = Depends(get_db_session)) -> ContactMessageService:
    return ContactMessageService(db)


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(db)


def get_auth_service(
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, tokens)


def get_bool_filter(
    is_active: Optional[bool] = Query(None, alias="isActive", description="Filter by active flag"),
) -> Optional[bool]:
    return is_active
