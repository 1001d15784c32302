"""Pydantic schemas for request/response validation."""

from .base import *
from .auth import *
from .user import *
from .website import *
from .content import *
from .contact_message import *

__all__ = [
    # Base schemas
    "BaseSchema",
    "PaginationParams",
    "HealthCheckResponse",
    "api_response",
    "error_body",

    # Auth schemas
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "VerifyEmailRequest",
    "UpdateProfileRequest",
    "ChangePasswordRequest",

    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserPermissionsUpdate",

    # Website schemas
    "WebsiteCreate",
    "WebsiteUpdate",
    "WebsiteSettings",
    "WebsiteSeo",
    "AssignAdminRequest",

    # Embedded content schemas
    "RoomCreate",
    "RoomUpdate",
    "HeroSectionUpsert",
    "FacilityCreate",
    "FacilityUpdate",
    "ReviewCreate",
    "ReviewUpdate",
    "OfferUpsert",
    "OurStoryUpdate",
    "SiteSettingsUpdate",
    "ContactInfoUpdate",

    # Contact messages
    "ContactMessageCreate",
]
