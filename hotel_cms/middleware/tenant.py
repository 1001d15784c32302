"""Website scope enforcement for admins."""

import logging
import uuid
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.database import get_db_session
from hotel_cms.core.exceptions import ForbiddenError, NotFoundError
from hotel_cms.middleware.auth import AuthContext, require_roles
from hotel_cms.models.user import ROLE_ADMIN, ROLE_SUPER_ADMIN
from hotel_cms.services.website_service import WebsiteService

logger = logging.getLogger(__name__)


async def resolve_target_website_id(request: Request) -> Optional[str]:
    """
    Website a request targets: path ``website_id``, then path ``id``, then
    the ``websiteId`` field of a JSON or form body.
    """
    website_id = request.path_params.get("website_id") or request.path_params.get("id")
    if website_id:
        return str(website_id)

    if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return None

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("websiteId"):
            return str(body["websiteId"])
    elif content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        website_id = form.get("websiteId")
        if isinstance(website_id, str) and website_id:
            return website_id
    return None


async def check_website_access(request: Request, context: AuthContext, db: AsyncSession) -> None:
    """
    Let a super_admin through; otherwise the target website, when there is
    one, must be assigned to the caller.

    Raises:
        NotFoundError: If the target website does not exist
        ForbiddenError: If it is assigned to someone else
    """
    if context.role == ROLE_SUPER_ADMIN:
        return

    target = await resolve_target_website_id(request)
    if target is None:
        return

    try:
        website_id = uuid.UUID(target)
    except ValueError:
        raise NotFoundError("Website not found")

    website = await WebsiteService(db).find_website(website_id)
    if website is None:
        raise NotFoundError("Website not found")

    if website.assigned_admin_id != context.user_id:
        logger.warning(f"User {context.user_id} denied access to website {website_id}")
        raise ForbiddenError("You do not have access to this website")


def require_website_access(*roles: str) -> Callable:
    """Role check followed by the website scope check."""
    role_checker = require_roles(*(roles or (ROLE_SUPER_ADMIN, ROLE_ADMIN)))

    async def website_access_checker(
        request: Request,
        context: AuthContext = Depends(role_checker),
        db: AsyncSession = Depends(get_db_session),
    ) -> AuthContext:
        await check_website_access(request, context, db)
        return context

    return website_access_checker
