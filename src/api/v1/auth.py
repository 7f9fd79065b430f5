# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication API endpoints."""

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from src.api.deps import get_current_user, get_db
from src.config import settings
from src.models import User
from src.rbac import get_role_permissions
from src.schemas.auth import AuthResponse, LoginRequest
from src.schemas.user import UserResponse
from src.services import auth_service


def build_user_response(user: User) -> UserResponse:
    """Build UserResponse with the permissions of the user's role."""
    response = UserResponse.model_validate(user)
    response.permissions = sorted(get_role_permissions(user.role))
    return response


router = APIRouter()


@router.post("/login", response_model=AuthResponse)
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """Login with username and password."""
    user = auth_service.authenticate(db, data.username, data.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    user_id = user.id
    token = auth_service.create_session(db, user_id)

    response.set_cookie(
        key="session",
        value=token,
        httponly=True,
        secure=False,  # Set to True in production
        samesite="lax",
        max_age=86400 * settings.session_expiry_days,
    )

    # Re-query user after session creation commit to avoid expired object error
    user = auth_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="User not found after session creation",
        )

    return AuthResponse(user=build_user_response(user))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    session: str | None = Cookie(default=None),
) -> None:
    """Logout current user."""
    if session:
        auth_service.delete_session(db, session)
    response.delete_cookie(key="session")


@router.get("/me", response_model=AuthResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> AuthResponse:
    """Get current authenticated user."""
    return AuthResponse(
        user=build_user_response(current_user), message="Authenticated"
    )
