"""Auth endpoints"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.user import UserCreate, UserResponse
from app.schemas.auth import (LoginRequest, MessageResponse,
                              RefreshTokenRequest, TokenResponse)
from app.services.auth_service import AuthService
from app.api.deps import get_current_user
from app.models.user import User
from app.core.exceptions import ConflictError, AuthenticationError

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    Args:
        user_data: User registration data
        db: Database session

    Returns:
        Token pair and the created user (without password)

    Raises:
        409: If email already exists
    """
    try:
        return await AuthService.register(user_data, db)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message
        )


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with email and password.

    Args:
        credentials: Email and password
        db: Database session

    Returns:
        Token pair and the user

    Raises:
        401: If credentials are invalid or the account is inactive
    """
    try:
        return await AuthService.login(credentials.email, credentials.password, db)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange a refresh token for a new token pair.

    Raises:
        401: If the refresh token is invalid, expired or superseded
    """
    try:
        return await AuthService.refresh_tokens(request.refresh_token, db)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Invalidate the current user's refresh token"""
    await AuthService.logout(current_user.id, db)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Get current user information.

    Args:
        current_user: Current authenticated user

    Returns:
        Current user profile (without password)
    """
    return UserResponse.model_validate(current_user)
