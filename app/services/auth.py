"""
Authentication service for registration, login, token management and profile updates.
Handles JWT token generation and validation and the user's own account.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.repositories.user import UserRepository, RoleRepository
from app.models.user import User
from app.models.team import Team
from app.permissions import RoleName
from app.schemas.auth import RegisterRequest
from app.schemas.user import ProfileUpdate
from app.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
)
from app.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    ValidationError,
    BadRequestError,
)
from jose import JWTError, ExpiredSignatureError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user authentication and account lifecycle.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.role_repo = RoleRepository(db_session)

    @property
    def access_token_ttl(self) -> int:
        """Access token lifetime in seconds."""
        return settings.access_token_expire_minutes * 60

    async def register(self, data: RegisterRequest) -> User:
        """
        Register a new account with the user role and a personal team.

        Args:
            data: Registration payload (password confirmation already checked)

        Returns:
            Created user, switched to the personal team

        Raises:
            ValidationError: If the email is already taken
        """
        if await self.user_repo.email_taken(data.email):
            raise ValidationError.for_field("email", "The email has already been taken.")

        try:
            user = User(name=data.name, email=data.email, is_active=True)
            user.set_password(data.password)

            role = await self.role_repo.get_by_name(RoleName.USER.value)
            if role is not None:
                user.roles = [role]
            else:
                logger.warning("Role 'user' is not seeded; registering without roles")

            self.db.add(user)
            await self.db.flush()

            team = Team(
                user_id=user.id,
                name=f"{user.first_name}'s Team",
                personal_team=True,
            )
            self.db.add(team)
            await self.db.flush()

            user.current_team_id = team.id
            await self.db.commit()

            logger.info(f"User registered: {user.email} (ID: {user.id})")
            return await self.user_repo.get_by_id(user.id)

        except APIException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to register {data.email}: {e}")
            raise BadRequestError(f"Failed to register user: {str(e)}")

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If the credentials are wrong or the account is inactive
        """
        user = await self.user_repo.get_by_email(email)

        if not user or not user.verify_password(password):
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login attempt for inactive account: {email}")
            raise InvalidCredentialsError("User account is inactive")

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """
        Create access and refresh tokens for user.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(
            user_id=user.id,
            email=user.email,
            roles=user.role_names
        )
        refresh_token = create_refresh_token(user_id=user.id, email=user.email)
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create a new access token from a refresh token.

        Raises:
            InvalidTokenError: If the token is invalid or the user no longer exists
            TokenExpiredError: If the token is expired
        """
        user = await self._user_from_token(refresh_token, "refresh")
        return create_access_token(user_id=user.id, email=user.email, roles=user.role_names)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            InvalidTokenError: If the token is invalid or the user no longer exists
            TokenExpiredError: If the token is expired
        """
        return await self._user_from_token(token, "access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            payload = verify_token(token, token_type=token_type)
            user_id = uuid.UUID(payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            raise InvalidTokenError(str(e) or "Invalid token")

        user = await self.user_repo.get_by_id(user_id)
        if not user or not user.is_active:
            raise InvalidTokenError("User not found or inactive")
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Update the authenticated user's name, email or password.

        Changing the password needs the current password and a matching confirmation.

        Raises:
            ValidationError: Field-keyed when the email is taken or the password checks fail
        """
        updates = {}

        if data.name is not None:
            updates["name"] = data.name.strip()

        if data.email is not None and data.email != user.email:
            if await self.user_repo.email_taken(data.email, exclude_user_id=user.id):
                raise ValidationError.for_field("email", "The email has already been taken.")
            updates["email"] = data.email

        if data.password is not None:
            errors = {}
            if not data.current_password or not user.verify_password(data.current_password):
                errors["current_password"] = ["The provided password does not match your current password."]
            if data.password_confirmation is None:
                errors["password_confirmation"] = ["The password confirmation does not match"]
            if errors:
                raise ValidationError(field_errors=errors)
            user.set_password(data.password)

        updated = await self.user_repo.update(user, updates)
        logger.info(f"Profile updated for user: {user.id}")
        return updated
