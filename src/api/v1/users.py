# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User management API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_permission
from src.api.v1.auth import build_user_response
from src.models import User
from src.models.enums import UserRole
from src.schemas.user import (
    UserCreate,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)
from src.services import user_service

router = APIRouter()


@router.get(
    "/users",
    response_model=list[UserResponse],
    summary="List all users",
)
def list_users(
    role: UserRole | None = None,
    department: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("user.manage")),
) -> list[UserResponse]:
    """Retrieve users, optionally filtered by role and department.

    Requires user.manage permission.
    """
    users = user_service.get_users(db, role=role, department=department)
    return [build_user_response(user) for user in users]


@router.get(
    "/users/departments",
    response_model=list[str],
    summary="List departments",
)
def list_departments(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("user.manage")),
) -> list[str]:
    """Departments that have at least one user."""
    return user_service.get_departments(db)


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("user.manage")),
) -> UserResponse:
    """Create a new user.

    Requires user.manage permission.
    """
    try:
        user = user_service.create_user(db, user_in)
    except user_service.UserExistsError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return build_user_response(user)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("user.manage")),
) -> UserResponse:
    """Retrieve a specific user by ID.

    Requires user.manage permission.
    """
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return build_user_response(user)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Update a user's details",
)
def update_user(
    user_id: uuid.UUID,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("user.manage")),
) -> UserResponse:
    """Update name, email, employee ID or department.

    Requires user.manage permission.
    """
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        user = user_service.update_user(db, user, user_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return build_user_response(user)


@router.patch(
    "/users/{user_id}/status",
    response_model=UserResponse,
    summary="Activate or deactivate a user",
)
def update_user_status(
    user_id: uuid.UUID,
    data: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("user.manage")),
) -> UserResponse:
    """Activate or deactivate a user.

    Requires user.manage permission.
    """
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    # Prevent deactivating yourself
    if user.id == current_user.id and not data.is_active:
        raise HTTPException(
            status_code=400, detail="You cannot deactivate your own account"
        )

    user = user_service.set_user_active(db, user, data.is_active)
    return build_user_response(user)
