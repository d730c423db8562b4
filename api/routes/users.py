"""User account routes"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_current_user
from api.responses import APIResponse, success_response
from domain.enums import UserRole
from domain.models import User
from domain.schemas.user_schemas import (
    UserCreate,
    UserProfileUpdate,
    UserAdminUpdate,
    UserResponse,
    UserStatsResponse,
)
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "", response_model=APIResponse[UserResponse], status_code=status.HTTP_201_CREATED
)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user account"""
    new_user = UserService.register_user(db, user)
    return success_response(
        data=UserResponse.model_validate(new_user), message="User registered successfully"
    )


@router.get("/profile", response_model=APIResponse[UserResponse])
def get_profile(current_user: User = Depends(get_current_user)):
    return success_response(data=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=APIResponse[UserResponse])
def update_profile(
    update: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = UserService.update_profile(db, current_user, update)
    return success_response(
        data=UserResponse.model_validate(user), message="Profile updated successfully"
    )


@router.get("", response_model=APIResponse[List[UserResponse]])
def list_users(
    search: Optional[str] = Query(None, description="Name or email substring"),
    role: Optional[UserRole] = Query(None),
    include_admins: bool = Query(True),
    include_deleted: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List user accounts (admin only)"""
    users = UserService.list_users(
        db,
        current_user,
        search=search,
        role=role,
        include_admins=include_admins,
        include_deleted=include_deleted,
    )
    return success_response(data=[UserResponse.model_validate(u) for u in users])


@router.get("/stats/overview", response_model=APIResponse[UserStatsResponse])
def user_stats(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return success_response(data=UserService.get_stats(db, current_user))


@router.get("/{user_id}", response_model=APIResponse[UserResponse])
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = UserService.get_user(db, user_id, current_user)
    return success_response(data=UserResponse.model_validate(user))


@router.put("/{user_id}", response_model=APIResponse[UserResponse])
def update_user(
    user_id: UUID,
    update: UserAdminUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = UserService.update_user(db, user_id, update, current_user)
    return success_response(
        data=UserResponse.model_validate(user), message="User updated successfully"
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Permanently delete a user (admin only, never yourself)"""
    UserService.delete_user(db, user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}/soft", response_model=APIResponse[UserResponse])
def soft_delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = UserService.soft_delete_user(db, user_id, current_user)
    return success_response(
        data=UserResponse.model_validate(user), message="User deactivated"
    )


@router.put("/{user_id}/restore", response_model=APIResponse[UserResponse])
def restore_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = UserService.restore_user(db, user_id, current_user)
    return success_response(data=UserResponse.model_validate(user), message="User restored")
