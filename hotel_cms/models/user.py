"""User model for operator identities and their website scope."""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Index, String, Uuid

from .base import TimestampMixin, serialize_value
from hotel_cms.core.database import Base
from hotel_cms.core.security import get_password_hash, verify_password

ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
USER_ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN)


class User(Base, TimestampMixin):
    """
    Operator account.

    A ``super_admin`` manages every website. An ``admin`` is scoped to the
    single website in ``website_id``; the website points back through
    ``Website.assigned_admin_id``. Both sides are only ever changed together
    by ``WebsiteService.set_assigned_admin``.
    """

    __tablename__ = "users"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID for user identity",
    )

    email = Column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login email, stored lower-cased",
    )

    password_hash = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    role = Column(
        String(20),
        nullable=False,
        default=ROLE_ADMIN,
        comment="super_admin or admin",
    )

    name = Column(String(100), nullable=False)
    avatar = Column(String(500), nullable=True)

    # Tenant scope
    website_id = Column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="Website this admin is assigned to",
    )
    website_access = Column(
        JSON,
        nullable=False,
        default=list,
        comment="Website ids this admin has access to",
    )

    # Status
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Credentials
    refresh_token_hash = Column(String(64), nullable=True)
    password_reset_token_hash = Column(String(64), nullable=True)
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_token = Column(String(64), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "role IN ('super_admin', 'admin')",
            name="valid_user_role",
        ),
        Index("idx_users_role", "role"),
        Index("idx_users_is_active", "is_active"),
    )

    def set_password(self, password: str) -> None:
        self.password_hash = get_password_hash(password)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN

    def access_list(self) -> List[str]:
        """Copy of ``website_access`` safe to mutate and reassign."""
        return list(self.website_access or [])

    def grant_access(self, website_id: uuid.UUID) -> None:
        access = self.access_list()
        if str(website_id) not in access:
            access.append(str(website_id))
        self.website_access = access

    def revoke_access(self, website_id: uuid.UUID) -> None:
        self.website_access = [w for w in self.access_list() if w != str(website_id)]

    def to_dict(self, website_name: Optional[str] = None) -> Dict[str, Any]:
        """Public representation; never includes credential material."""
        data = {
            "id": serialize_value(self.id),
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "avatar": self.avatar,
            "websiteId": serialize_value(self.website_id),
            "websiteAccess": self.access_list(),
            "isActive": self.is_active,
            "emailVerified": self.email_verified,
            "lastLogin": serialize_value(self.last_login_at),
            "createdAt": serialize_value(self.created_at),
            "updatedAt": serialize_value(self.updated_at),
        }
        if website_name is not None:
            data["websiteName"] = website_name
        return data

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
