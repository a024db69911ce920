"""
Authentication API endpoints for registration, login, token management and the current user.
Provides stateless JWT-based authentication.
"""

from fastapi import APIRouter, Depends, status
from app.models.user import User
from app.services.auth import AuthService
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
)
from app.schemas.user import CurrentUserResponse, ProfileUpdate
from app.schemas.common import APIResponse, success_response
from app.schemas.error import get_error_responses, get_auth_error_responses
from app.utils.dependencies import get_auth_service, get_current_active_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_payload(auth_service: AuthService, user: User, access_token: str, refresh_token: str) -> dict:
    return {
        "user": user,
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "expires_in": auth_service.access_token_ttl,
    }


@router.post(
    "/register",
    response_model=APIResponse[LoginResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="Create a user with the default role and a personal team, returning JWT tokens",
    responses=get_error_responses(422)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user account.

    Args:
        register_data: Name, email, password and its confirmation
        auth_service: Authentication service

    Returns:
        The new user with access and refresh tokens

    Raises:
        ValidationError: If the email is taken or the confirmation does not match
    """
    user = await auth_service.register(register_data)
    access_token, refresh_token = auth_service.create_tokens(user)
    return success_response(
        _token_payload(auth_service, user, access_token, refresh_token),
        message="Registration successful",
        code=status.HTTP_201_CREATED,
    )


@router.post(
    "/login",
    response_model=APIResponse[LoginResponse],
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns JWT tokens",
    responses=get_error_responses(401, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate user and return JWT tokens.

    Raises:
        InvalidCredentialsError: If credentials are invalid or the account is inactive
    """
    user, access_token, refresh_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return success_response(
        _token_payload(auth_service, user, access_token, refresh_token),
        message="Login successful",
    )


@router.post(
    "/refresh",
    response_model=APIResponse[AccessTokenResponse],
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
    description="Generate new access token using refresh token",
    responses=get_error_responses(401)
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    access_token = await auth_service.refresh_access_token(refresh_data.refresh_token)
    return success_response(
        {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": auth_service.access_token_ttl,
        },
        message="Token refreshed successfully",
    )


@router.get(
    "/me",
    response_model=APIResponse[CurrentUserResponse],
    summary="Get current user",
    description="The authenticated user with roles and effective permissions",
    responses=get_auth_error_responses()
)
async def get_me(current_user: User = Depends(get_current_active_user)):
    return success_response(current_user, message="User retrieved successfully")


@router.put(
    "/me",
    response_model=APIResponse[CurrentUserResponse],
    summary="Update profile",
    description="Change name, email or password. A new password requires the current one.",
    responses=get_error_responses(401, 422)
)
async def update_me(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    user = await auth_service.update_profile(current_user, profile_data)
    return success_response(user, message="Profile updated successfully")


@router.post(
    "/logout",
    response_model=APIResponse[None],
    summary="Logout",
    description="Tokens are stateless; clients discard them. Kept for API symmetry.",
    responses=get_auth_error_responses()
)
async def logout(current_user: User = Depends(get_current_active_user)):
    return success_response(message="Successfully logged out")
