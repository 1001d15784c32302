"""Authentication request schemas."""

from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, EmailStr, Field

from .base import BaseSchema

# Emails are unique case-insensitively, so they are stored lower-cased.
LowercaseEmail = Annotated[EmailStr, AfterValidator(str.lower)]


class RegisterRequest(BaseSchema):
    email: LowercaseEmail = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password")
    name: str = Field(..., min_length=1, max_length=100)
    role: Optional[Literal["super_admin", "admin"]] = None


class LoginRequest(BaseSchema):
    email: LowercaseEmail = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class RefreshTokenRequest(BaseSchema):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


class ForgotPasswordRequest(BaseSchema):
    email: LowercaseEmail


class ResetPasswordRequest(BaseSchema):
    token: str = Field(..., min_length=1, description="Password reset token")
    password: str = Field(..., min_length=8, description="New password")


class VerifyEmailRequest(BaseSchema):
    token: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar: Optional[str] = None


class ChangePasswordRequest(BaseSchema):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)
