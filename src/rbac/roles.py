# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
# src/rbac/roles.py
from src.models.enums import UserRole

# Roles are fixed; each maps to a static permission set
ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.LECTURER: frozenset(
        {
            "claim.submit",
            "claim.view.own",
            "document.upload",
        }
    ),
    UserRole.PROGRAMME_COORDINATOR: frozenset(
        {
            "claim.view.department",
            "claim.review",
        }
    ),
    UserRole.ACADEMIC_MANAGER: frozenset(
        {
            "claim.view.all",
            "claim.review",
        }
    ),
    UserRole.HR: frozenset(
        {
            "claim.view.all",
            "claim.review",
            "claim.pay",
            "user.manage",
        }
    ),
}
