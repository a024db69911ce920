"""
Pydantic schemas for authentication requests and responses.
Handles registration, login, token refresh and token payloads.
"""

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from app.schemas.user import UserBase, CurrentUserResponse


class RegisterRequest(UserBase):
    """Self-service registration."""

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="User's password (minimum 8 characters)",
        examples=["securepassword123"]
    )
    password_confirmation: str = Field(..., description="Must match password")

    @field_validator('password_confirmation')
    @classmethod
    def validate_confirmation(cls, v, info: ValidationInfo):
        if v != info.data.get("password"):
            raise ValueError("The password confirmation does not match")
        return v


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["agent@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(
        ...,
        description="Access token expiration time in seconds",
        examples=[1800]
    )


class LoginResponse(TokenResponse):
    """Tokens plus the authenticated user."""

    user: CurrentUserResponse


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds")
