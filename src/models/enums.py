# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types for database models."""

from enum import Enum


class ClaimStatus(str, Enum):
    """Claim status enumeration.

    Status flow:
        PENDING → UNDER_REVIEW → APPROVED → PAID
           ↓          ↓ ↑
           └──────→ REJECTED
    """

    PENDING = "pending"  # Submitted, not yet looked at
    UNDER_REVIEW = "under_review"  # Returned for review / more information
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"  # Paid out by HR

    @property
    def label(self) -> str:
        """Human readable status name."""
        return STATUS_LABELS[self]


STATUS_LABELS = {
    ClaimStatus.PENDING: "Pending",
    ClaimStatus.UNDER_REVIEW: "Under Review",
    ClaimStatus.APPROVED: "Approved",
    ClaimStatus.REJECTED: "Rejected",
    ClaimStatus.PAID: "Paid",
}


class UserRole(str, Enum):
    """Role of a portal user."""

    LECTURER = "lecturer"
    PROGRAMME_COORDINATOR = "programme_coordinator"
    ACADEMIC_MANAGER = "academic_manager"
    HR = "hr"
