# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from src.models.actor import SYSTEM_ACTOR, Actor
from src.models.base import Base, TimestampMixin
from src.models.claim import Claim
from src.models.claim_status_history import ClaimStatusHistory
from src.models.enums import ClaimStatus, UserRole
from src.models.session import Session
from src.models.supporting_document import SupportingDocument
from src.models.user import User

__all__ = [
    "SYSTEM_ACTOR",
    "Actor",
    "Base",
    "Claim",
    "ClaimStatus",
    "ClaimStatusHistory",
    "Session",
    "SupportingDocument",
    "TimestampMixin",
    "User",
    "UserRole",
]
