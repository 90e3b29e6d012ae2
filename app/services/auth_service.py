"""Authentication logic"""
import logging
from uuid import UUID

from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import AuthenticationError
from app.core.security import (REFRESH_TOKEN_TYPE, create_access_token,
                               create_refresh_token, parse_expiration_time,
                               verify_password, verify_token)
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import TokenResponse
from app.schemas.user import UserCreate, UserResponse
from app.services.user_service import UserService

settings = get_settings()
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INACTIVE_ACCOUNT = "Account is inactive"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


class AuthService:
    """Service for authentication operations"""

    @staticmethod
    def generate_tokens(user: User) -> dict:
        """
        Create an access/refresh token pair for a user.

        Args:
            user: User object

        Returns:
            Dictionary with access_token, refresh_token, token_type and expires_in
        """
        token_data = {"sub": str(user.id), "email": user.email}

        return {
            "access_token": create_access_token(token_data),
            "refresh_token": create_refresh_token(token_data),
            "token_type": "bearer",
            "expires_in": parse_expiration_time(settings.jwt_expires_in),
        }

    @staticmethod
    async def _issue_tokens(user: User, db: AsyncSession) -> TokenResponse:
        tokens = AuthService.generate_tokens(user)
        # Only the latest refresh token is kept, older sessions stop refreshing
        await UserService.update_refresh_token(user.id, tokens["refresh_token"], db)
        return TokenResponse(**tokens, user=UserResponse.model_validate(user))

    @staticmethod
    async def register(user_data: UserCreate, db: AsyncSession) -> TokenResponse:
        """
        Register a new user and sign them in.

        Args:
            user_data: User registration data
            db: Database session

        Returns:
            Token pair and the created user

        Raises:
            ConflictError: If email already exists
        """
        logger.info("Registering new user with email %s", user_data.email)
        user = await UserService.create_user(user_data, db)
        response = await AuthService._issue_tokens(user, db)
        logger.info("User registered successfully: %s", user.id)
        return response

    @staticmethod
    async def authenticate_user(email: str, password: str, db: AsyncSession) -> User:
        """
        Check credentials.

        Args:
            email: User email
            password: Plain text password
            db: Database session

        Returns:
            The authenticated user

        Raises:
            AuthenticationError: "Invalid credentials" for an unknown email or a
                wrong password, "Account is inactive" for a disabled account
        """
        user = await UserRepository.get_by_email(db, email)

        if not user:
            logger.warning("Login failed - user not found: %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not user.is_active:
            logger.warning("Login failed - inactive user: %s", email)
            raise AuthenticationError(INACTIVE_ACCOUNT)

        if not verify_password(password, user.hashed_password):
            logger.warning("Login failed - invalid password: %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        return user

    @staticmethod
    async def login(email: str, password: str, db: AsyncSession) -> TokenResponse:
        """
        Login user and return a token pair.

        Args:
            email: User email
            password: Plain text password
            db: Database session

        Returns:
            Token pair and the user

        Raises:
            AuthenticationError: If credentials are invalid or account inactive
        """
        logger.info("Login attempt for email %s", email)
        user = await AuthService.authenticate_user(email, password, db)
        response = await AuthService._issue_tokens(user, db)
        logger.info("User logged in successfully: %s", user.id)
        return response

    @staticmethod
    async def refresh_tokens(refresh_token: str, db: AsyncSession) -> TokenResponse:
        """
        Exchange a refresh token for a new token pair.

        Args:
            refresh_token: Refresh token previously issued to the user
            db: Database session

        Returns:
            New token pair; the presented refresh token stops being valid

        Raises:
            AuthenticationError: If the token is invalid, expired, superseded,
                or the account is inactive
        """
        try:
            payload = verify_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
            user_id = UUID(payload.get("sub") or "")
        except (JWTError, ValueError):
            logger.warning("Token refresh failed - undecodable token")
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        user = await UserRepository.get_by_id(db, user_id)
        if not user or user.refresh_token != refresh_token:
            logger.warning("Token refresh failed - unknown or superseded token for %s", user_id)
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        if not user.is_active:
            logger.warning("Token refresh failed - inactive user: %s", user_id)
            raise AuthenticationError(INACTIVE_ACCOUNT)

        response = await AuthService._issue_tokens(user, db)
        logger.info("Access token refreshed for user %s", user_id)
        return response

    @staticmethod
    async def logout(user_id: UUID, db: AsyncSession) -> None:
        """
        Forget the stored refresh token.

        Args:
            user_id: User UUID
            db: Database session
        """
        await UserService.remove_refresh_token(user_id, db)
        logger.info("User logged out successfully: %s", user_id)
