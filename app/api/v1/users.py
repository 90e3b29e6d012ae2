"""User endpoints"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from app.database import get_db
from app.models.user import User
from app.schemas.common import count_pages
from app.schemas.user import UserListResponse, UserResponse, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def _require_self(user_id: UUID, current_user: User, action: str) -> None:
    if user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} your own account",
        )


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(
        None, description="Search users by name or email"
    ),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get list of users with pagination and search.

    Used to pick the other party when recording a debt.

    Args:
        page: Page number (1-indexed)
        limit: Number of items per page (max 100)
        search: Optional search term
        current_user: Current authenticated user
        db: Database session

    Returns:
        Paginated list of users
    """
    users, total_count = await UserService.list_users(
        db, page=page, limit=limit, search=search
    )

    return UserListResponse(
        items=[UserResponse.model_validate(user) for user in users],
        total=total_count,
        page=page,
        limit=limit,
        total_pages=count_pages(total_count, limit),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get user details by ID.

    Raises:
        404: If user not found
    """
    try:
        user = await UserService.get_user_by_id(db, user_id)
        return UserResponse.model_validate(user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the current user's profile.

    Raises:
        403: If the target is another user
        404: If user not found
        409: If the new email is already taken
    """
    _require_self(user_id, current_user, "update")
    try:
        user = await UserService.update_user(user_id, user_data, db)
        return UserResponse.model_validate(user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete the current user's account.

    Raises:
        400: If the user still has unpaid debts
        403: If the target is another user
        404: If user not found
    """
    _require_self(user_id, current_user, "delete")
    try:
        await UserService.delete_user(user_id, db)
        return None
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
