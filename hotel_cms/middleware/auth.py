"""Authentication and role dependencies."""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.database import get_db_session
from hotel_cms.core.exceptions import ForbiddenError, UnauthenticatedError
from hotel_cms.models.user import User
from hotel_cms.services.token_service import (
    TokenExpiredError,
    TokenInvalidError,
    TokenService,
    get_token_service,
)

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """Verified caller attached to ``request.state.auth``."""

    user: User
    user_id: uuid.UUID
    role: str
    website_id: Optional[uuid.UUID]

    @property
    def is_super_admin(self) -> bool:
        return self.user.is_super_admin


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    """
    Resolve the bearer token to an active user.

    Raises:
        UnauthenticatedError: Missing or malformed header, bad or expired
            token, unknown user, or deactivated user
    """
    if credentials is None:
        logger.warning(f"Missing bearer token for {request.url.path}")
        raise UnauthenticatedError("Access token is required")

    try:
        payload = tokens.verify_access(credentials.credentials)
    except TokenExpiredError:
        raise UnauthenticatedError("Token has expired")
    except TokenInvalidError:
        raise UnauthenticatedError("Invalid token")

    user = await db.get(User, payload.user_id)
    if user is None:
        raise UnauthenticatedError("User not found")
    if not user.is_active:
        raise UnauthenticatedError("User account is deactivated")

    context = AuthContext(
        user=user,
        user_id=user.id,
        role=user.role,
        website_id=payload.website_id or user.website_id,
    )
    request.state.auth = context
    request.state.user_id = str(user.id)
    request.state.website_id = str(context.website_id) if context.website_id else None

    logger.debug(f"Authenticated user {user.id} for {request.url.path}")
    return context


def require_roles(*roles: str) -> Callable:
    """Dependency that only lets the listed roles through."""

    async def role_checker(context: AuthContext = Depends(authenticate)) -> AuthContext:
        if context is None or context.role not in roles:
            raise ForbiddenError("You do not have permission to perform this action")
        return context

    return role_checker
