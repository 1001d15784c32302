"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status

from hotel_cms.api.dependencies.common import get_auth_service
from hotel_cms.core.settings import get_settings
from hotel_cms.middleware.auth import AuthContext, authenticate
from hotel_cms.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    VerifyEmailRequest,
)
from hotel_cms.schemas.base import api_response
from hotel_cms.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent"


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user, tokens = await service.register(data)
    return api_response(
        {"user": user.to_dict(), "tokens": tokens.to_dict()},
        message="User registered successfully",
    )


@router.post("/login")
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """
    Authenticate with email and password.

    Deactivated accounts and admins without an assigned website get a 403
    even when the password is right.
    """
    user, tokens = await service.login(data)
    return api_response(
        {"user": await service.profile(user), "tokens": tokens.to_dict()},
        message="Login successful",
    )


@router.post("/refresh")
async def refresh_token(data: RefreshTokenRequest, service: AuthService = Depends(get_auth_service)):
    tokens = await service.refresh(data.refresh_token)
    return api_response({"tokens": tokens.to_dict()})


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest, service: AuthService = Depends(get_auth_service)):
    token = await service.forgot_password(data.email)
    extra = {}
    # No mail delivery yet; outside production the token is handed back directly
    if token and not get_settings().is_production:
        extra["resetToken"] = token
    return api_response(message=RESET_REQUESTED_MESSAGE, **extra)


@router.post("/reset-password")
async def reset_password(data: ResetPasswordRequest, service: AuthService = Depends(get_auth_service)):
    await service.reset_password(data)
    return api_response(message="Password reset successfully")


@router.post("/verify-email")
async def verify_email(data: VerifyEmailRequest, service: AuthService = Depends(get_auth_service)):
    await service.verify_email(data.token)
    return api_response(message="Email verified successfully")


@router.post("/logout")
async def logout(
    context: AuthContext = Depends(authenticate),
    service: AuthService = Depends(get_auth_service),
):
    await service.logout(context.user)
    return api_response(message="Logged out successfully")


@router.get("/me")
async def get_me(
    context: AuthContext = Depends(authenticate),
    service: AuthService = Depends(get_auth_service),
):
    return api_response({"user": await service.profile(context.user)})


@router.put("/profile")
async def update_profile(
    data: UpdateProfileRequest,
    context: AuthContext = Depends(authenticate),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_profile(context.user, data)
    return api_response({"user": user.to_dict()}, message="Profile updated successfully")


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    context: AuthContext = Depends(authenticate),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(context.user, data)
    return api_response(message="Password changed successfully")
