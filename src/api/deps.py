# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

from collections.abc import Callable

from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.database import get_db
from src.models import User
from src.rbac import user_has_permission
from src.services import auth_service
from src.services.claim_service import ClaimScope

__all__ = [
    "get_claim_scope",
    "get_current_user",
    "get_db",
    "require_permission",
]


def get_current_user(
    db: Session = Depends(get_db),
    session: str | None = Cookie(default=None),
) -> User:
    """Get current authenticated user from session cookie."""
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    session_obj = auth_service.get_session(db, session)
    if not session_obj:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
        )

    user = auth_service.get_user_by_id(db, session_obj.user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return user


def get_claim_scope(current_user: User = Depends(get_current_user)) -> ClaimScope:
    """Claims the current user is allowed to see."""
    return ClaimScope.for_user(current_user)


def require_permission(permission_code: str) -> Callable[..., User]:
    """Dependency for permission-based authorization."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not user_has_permission(current_user, permission_code):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {permission_code}",
            )
        return current_user

    return dependency
