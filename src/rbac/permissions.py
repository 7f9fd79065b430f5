# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
# src/rbac/permissions.py
CORE_PERMISSIONS = [
    # Claim submission (lecturers)
    {"code": "claim.submit", "module": "claims", "description": "Submit claims"},
    {
        "code": "claim.view.own",
        "module": "claims",
        "description": "View own claims",
    },
    {
        "code": "document.upload",
        "module": "claims",
        "description": "Attach supporting documents to own claims",
    },
    # Claim review
    {
        "code": "claim.view.department",
        "module": "claims",
        "description": "View claims of lecturers in the same department",
    },
    {
        "code": "claim.view.all",
        "module": "claims",
        "description": "View all claims",
    },
    {
        "code": "claim.review",
        "module": "claims",
        "description": "Approve, reject or return claims for review",
    },
    {
        "code": "claim.pay",
        "module": "claims",
        "description": "Mark approved claims as paid",
    },
    # Administration
    {
        "code": "user.manage",
        "module": "core",
        "description": "Create, deactivate, and manage users",
    },
]

PERMISSION_CODES = frozenset(p["code"] for p in CORE_PERMISSIONS)
