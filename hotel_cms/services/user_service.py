"""User management service for super_admins."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from hotel_cms.models.user import ROLE_ADMIN, User
from hotel_cms.schemas.user import UserCreate, UserPermissionsUpdate, UserUpdate
from hotel_cms.services.website_service import WebsiteService, commit_website_changes

logger = logging.getLogger(__name__)


class UserService:
    """
    Admin account management.

    Any change to an admin's assigned website goes through
    ``WebsiteService.set_assigned_admin`` so both sides of the link stay in
    step.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.websites = WebsiteService(db_session)

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self, is_active: Optional[bool] = None, search: Optional[str] = None) -> List[User]:
        """
        List admin accounts, newest first.

        Args:
            is_active: Only users with this active flag
            search: Case-insensitive substring of name or email
        """
        query = select(User).where(User.role == ROLE_ADMIN)
        if is_active is not None:
            query = query.where(User.is_active.is_(is_active))
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        query = query.order_by(User.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _assign(self, user: User, website_id: uuid.UUID) -> None:
        website = await self.websites.get_website(website_id)
        await self.websites.set_assigned_admin(website=website, admin=user)

    async def create_user(self, data: UserCreate) -> User:
        """
        Create an admin account.

        Raises:
            ValidationError: If the email is already registered
            NotFoundError: If ``websiteId`` names a missing website
        """
        logger.info(f"Creating user {data.email}")

        existing = await self.db.execute(select(User.id).where(User.email == data.email))
        if existing.first() is not None:
            raise ValidationError("User with this email already exists")

        user = User(
            id=uuid.uuid4(),
            email=data.email,
            name=data.name,
            role=ROLE_ADMIN,
            website_access=[str(w) for w in data.website_access],
            is_active=data.is_active,
        )
        user.set_password(data.password)
        self.db.add(user)

        if data.website_id is not None:
            await self._assign(user, data.website_id)

        try:
            await commit_website_changes(self.db)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Database integrity error creating user: {e}")
            raise ValidationError("User with this email already exists")

        logger.info(f"Successfully created user {user.id}")
        return user

    async def update_user(self, user_id: uuid.UUID, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        fields = data.model_dump(exclude_unset=True)

        for key in ("name", "avatar", "is_active"):
            if fields.get(key) is not None:
                setattr(user, key, fields[key])
        if fields.get("website_access") is not None:
            user.website_access = [str(w) for w in fields["website_access"]]
        if fields.get("website_id") is not None and fields["website_id"] != user.website_id:
            await self._assign(user, fields["website_id"])

        await commit_website_changes(self.db)
        logger.info(f"Updated user {user.id}")
        return user

    async def delete_user(self, user_id: uuid.UUID, current_user_id: uuid.UUID) -> None:
        """
        Delete an admin account and release its website.

        Raises:
            ForbiddenError: For super_admin accounts and for the caller's own account
        """
        user = await self.get_user(user_id)
        if user.is_super_admin:
            raise ForbiddenError("Cannot delete super admin user")
        if user.id == current_user_id:
            raise ForbiddenError("Cannot delete your own account")

        await self.websites.set_assigned_admin(admin=user)
        await self.db.delete(user)
        await commit_website_changes(self.db)
        logger.info(f"Deleted user {user_id}")

    async def update_permissions(self, user_id: uuid.UUID, data: UserPermissionsUpdate) -> User:
        user = await self.get_user(user_id)
        if data.website_access is not None:
            user.website_access = [str(w) for w in data.website_access]
        if data.role is not None and data.role != user.role:
            if data.role != ROLE_ADMIN:
                # A super_admin carries no website scope
                await self.websites.set_assigned_admin(admin=user)
            user.role = data.role
        await commit_website_changes(self.db)
        return user

    async def toggle_status(self, user_id: uuid.UUID) -> User:
        user = await self.get_user(user_id)
        if user.is_super_admin:
            raise ForbiddenError("Cannot change super admin status")
        user.is_active = not user.is_active
        await self.db.commit()
        logger.info(f"User {user.id} {'activated' if user.is_active else 'deactivated'}")
        return user
