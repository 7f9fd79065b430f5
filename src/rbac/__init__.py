# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role based permissions."""

from src.models import User
from src.models.enums import UserRole
from src.rbac.permissions import CORE_PERMISSIONS, PERMISSION_CODES
from src.rbac.roles import ROLE_PERMISSIONS


def get_role_permissions(role: UserRole) -> frozenset[str]:
    """Get the permission codes granted to a role."""
    return ROLE_PERMISSIONS.get(role, frozenset())


def user_has_permission(user: User, permission_code: str) -> bool:
    """Check whether an active user's role grants a permission."""
    if not user.is_active:
        return False
    return permission_code in get_role_permissions(user.role)


__all__ = [
    "CORE_PERMISSIONS",
    "PERMISSION_CODES",
    "ROLE_PERMISSIONS",
    "get_role_permissions",
    "user_has_permission",
]
