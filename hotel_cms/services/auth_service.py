"""Authentication service: registration, login, token rotation and password flows."""

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from hotel_cms.core.security import generate_token, hash_token
from hotel_cms.core.settings import Settings, get_settings
from hotel_cms.models.base import utcnow
from hotel_cms.models.user import ROLE_ADMIN, User
from hotel_cms.models.website import Website
from hotel_cms.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
)
from hotel_cms.services.token_service import TokenError, TokenPair, TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Credential handling for operator accounts.

    Only the sha256 of the current refresh token is stored, so logging out or
    refreshing invalidates every earlier refresh token.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        token_service: Optional[TokenService] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db_session
        self.settings = settings or get_settings()
        self.tokens = token_service or TokenService(self.settings)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def website_name(self, user: User) -> Optional[str]:
        if user.role != ROLE_ADMIN or user.website_id is None:
            return None
        website = await self.db.get(Website, user.website_id)
        return website.name if website else None

    async def profile(self, user: User) -> Dict[str, Any]:
        """User representation including the assigned website's name."""
        return user.to_dict(website_name=await self.website_name(user))

    def _issue(self, user: User) -> TokenPair:
        pair = self.tokens.issue(user.id, user.role, user.website_id)
        user.refresh_token_hash = hash_token(pair.refresh_token)
        return pair

    # Registration and login

    async def register(self, data: RegisterRequest) -> Tuple[User, TokenPair]:
        """
        Create an account and sign it in.

        Raises:
            ValidationError: If the email is already registered
        """
        logger.info(f"Registering user {data.email}")
        if await self.get_by_email(data.email):
            raise ValidationError("User with this email already exists")

        user = User(
            id=uuid.uuid4(),
            email=data.email,
            name=data.name,
            role=data.role or ROLE_ADMIN,
            website_access=[],
            email_verification_token=generate_token(),
        )
        user.set_password(data.password)
        pair = self._issue(user)
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Database integrity error registering user: {e}")
            raise ValidationError("User with this email already exists")

        logger.info(f"Registered user {user.id}")
        return user, pair

    async def login(self, data: LoginRequest) -> Tuple[User, TokenPair]:
        """
        Verify credentials and issue a token pair.

        Raises:
            UnauthenticatedError: If the email or password is wrong
            ForbiddenError: If the account is deactivated, or is an admin
                without an assigned website
        """
        user = await self.get_by_email(data.email)
        if user is None or not user.check_password(data.password):
            logger.warning(f"Failed login attempt for {data.email}")
            raise UnauthenticatedError("Invalid email or password")

        if not user.is_active:
            raise ForbiddenError("Your account has been deactivated")

        if user.role == ROLE_ADMIN and user.website_id is None:
            raise ForbiddenError(
                "Your account is not assigned to any website. Please contact the super admin."
            )

        pair = self._issue(user)
        user.last_login_at = utcnow()
        await self.db.commit()

        logger.info(f"User {user.id} logged in")
        return user, pair

    async def logout(self, user: User) -> None:
        user.refresh_token_hash = None
        await self.db.commit()
        logger.info(f"User {user.id} logged out")

    async def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange the current refresh token for a new pair.

        Raises:
            UnauthenticatedError: If the token is invalid, expired or has
                already been rotated
        """
        try:
            payload = self.tokens.verify_refresh(refresh_token)
        except TokenError:
            raise UnauthenticatedError("Invalid or expired refresh token")

        user = await self.db.get(User, payload.user_id)
        if user is None or user.refresh_token_hash != hash_token(refresh_token):
            raise UnauthenticatedError("Invalid refresh token")
        if not user.is_active:
            raise UnauthenticatedError("User account is deactivated")

        pair = self._issue(user)
        await self.db.commit()
        return pair

    # Password reset and email verification

    async def forgot_password(self, email: str) -> Optional[str]:
        """
        Start a password reset.

        Returns:
            The raw reset token, or None when no account matches. Callers must
            not reveal which case occurred.
        """
        user = await self.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None

        token = generate_token()
        user.password_reset_token_hash = hash_token(token)
        user.password_reset_expires = utcnow() + timedelta(
            minutes=self.settings.password_reset_expire_minutes
        )
        await self.db.commit()

        logger.info(f"Password reset token issued for user {user.id}")
        return token

    async def reset_password(self, data: ResetPasswordRequest) -> None:
        result = await self.db.execute(
            select(User).where(User.password_reset_token_hash == hash_token(data.token))
        )
        user = result.scalar_one_or_none()
        if user is None or user.password_reset_expires is None:
            raise ValidationError("Invalid or expired reset token")

        expires = user.password_reset_expires
        if expires.tzinfo is None:
            # SQLite hands back naive datetimes
            expires = expires.replace(tzinfo=utcnow().tzinfo)
        if expires <= utcnow():
            raise ValidationError("Invalid or expired reset token")

        user.set_password(data.password)
        user.password_reset_token_hash = None
        user.password_reset_expires = None
        user.refresh_token_hash = None
        await self.db.commit()
        logger.info(f"Password reset for user {user.id}")

    async def verify_email(self, token: str) -> User:
        result = await self.db.execute(select(User).where(User.email_verification_token == token))
        user = result.scalar_one_or_none()
        if user is None:
            raise ValidationError("Invalid verification token")

        user.email_verified = True
        user.email_verification_token = None
        await self.db.commit()
        return user

    # Own profile

    async def update_profile(self, user: User, data: UpdateProfileRequest) -> User:
        fields = data.model_dump(exclude_unset=True)
        for key in ("name", "avatar"):
            if fields.get(key) is not None:
                setattr(user, key, fields[key])
        await self.db.commit()
        return user

    async def change_password(self, user: User, data: ChangePasswordRequest) -> None:
        if not user.check_password(data.current_password):
            raise ValidationError("Current password is incorrect")
        user.set_password(data.new_password)
        await self.db.commit()
        logger.info(f"Password changed for user {user.id}")
