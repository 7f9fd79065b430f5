# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Append-only audit log of claim status transitions."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.enums import ClaimStatus

if TYPE_CHECKING:
    from src.models.claim import Claim


def format_time_ago(changed: datetime, now: datetime | None = None) -> str:
    """Bucket the time since ``changed`` into days, hours or minutes."""
    elapsed = (now or datetime.utcnow()) - changed
    if elapsed >= timedelta(days=1):
        return f"{elapsed.days}d ago"
    seconds = int(elapsed.total_seconds())
    if seconds >= 3600:
        return f"{seconds // 3600}h ago"
    if seconds >= 60:
        return f"{seconds // 60}m ago"
    return "Just now"


class ClaimStatusHistory(Base):
    """One status transition of a claim.

    Rows are written once by ``Claim.transition`` and never updated or
    deleted while the claim exists. ``sequence`` is the 1-based position of
    the record within its claim's log.
    """

    __tablename__ = "claim_status_history"
    __table_args__ = (
        UniqueConstraint(
            "claim_id", "sequence", name="uq_claim_status_history_sequence"
        ),
    )

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    claim_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    old_status: Mapped[ClaimStatus] = mapped_column(Enum(ClaimStatus), nullable=False)
    new_status: Mapped[ClaimStatus] = mapped_column(Enum(ClaimStatus), nullable=False)
    changed_date: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )
    changed_by: Mapped[str] = mapped_column(String(100), nullable=False)
    changed_by_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    change_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    claim: Mapped[Claim] = relationship("Claim", back_populates="status_history")

    @property
    def status_change(self) -> str:
        return f"{self.old_status.label} → {self.new_status.label}"

    def time_ago(self, now: datetime | None = None) -> str:
        return format_time_ago(self.changed_date, now)

    @property
    def duration(self) -> str:
        return self.time_ago()
