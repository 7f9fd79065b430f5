# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Claim model and its status lifecycle."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    Uuid,
)
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from src.models.base import Base, TimestampMixin
from src.models.claim_status_history import ClaimStatusHistory
from src.models.enums import ClaimStatus

if TYPE_CHECKING:
    from src.models.actor import Actor
    from src.models.supporting_document import SupportingDocument
    from src.models.user import User

# Statuses that stamp the approval date and approver
DECISION_STATUSES = frozenset({ClaimStatus.APPROVED, ClaimStatus.REJECTED})
# Statuses that put a claim back into the open queue
OPEN_STATUSES = frozenset({ClaimStatus.PENDING, ClaimStatus.UNDER_REVIEW})

STATUS_BADGE_CLASSES = {
    ClaimStatus.PENDING: "bg-warning",
    ClaimStatus.UNDER_REVIEW: "bg-info",
    ClaimStatus.APPROVED: "bg-success",
    ClaimStatus.REJECTED: "bg-danger",
    ClaimStatus.PAID: "bg-primary",
}
DEFAULT_BADGE_CLASS = "bg-secondary"


def status_badge_class(status: Any) -> str:
    """Map a status to its badge CSS class, falling back for unknown values."""
    try:
        return STATUS_BADGE_CLASSES.get(status, DEFAULT_BADGE_CLASS)
    except TypeError:
        # Unhashable input
        return DEFAULT_BADGE_CLASS


def format_processing_time(delta: timedelta | None) -> str:
    """Render a processing duration such as ``3d 4h`` or ``2h 15m``."""
    if delta is None:
        return "Not yet resolved"
    total_minutes = max(int(delta.total_seconds() // 60), 0)
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    # str() first so floats don't drag binary noise into the amount
    return Decimal(str(value))


class Claim(Base, TimestampMixin):
    """A lecturer's monthly teaching-hours claim.

    The status is only ever changed through :meth:`transition`, which keeps
    the status history in step with the current state. ``total_amount`` is
    derived from hours and rate and cannot be assigned directly.
    """

    __tablename__ = "claims"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    lecturer_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # First day of the claimed month
    period: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # Scale 4 holds any product of two 2-decimal factors exactly
    _total_amount: Mapped[Decimal] = mapped_column(
        "total_amount", Numeric(18, 4), nullable=False
    )
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ClaimStatus] = mapped_column(
        Enum(ClaimStatus),
        default=ClaimStatus.PENDING,
        nullable=False,
        index=True,
    )
    submission_date: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
    )
    approval_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    stored_processing_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Optimistic concurrency counter, bumped by SQLAlchemy on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    lecturer: Mapped[User] = relationship("User", back_populates="claims")
    supporting_documents: Mapped[list[SupportingDocument]] = relationship(
        "SupportingDocument",
        back_populates="claim",
        cascade="all, delete-orphan",
        order_by="SupportingDocument.upload_date",
    )
    status_history: Mapped[list[ClaimStatusHistory]] = relationship(
        "ClaimStatusHistory",
        back_populates="claim",
        cascade="all, delete-orphan",
        order_by="ClaimStatusHistory.sequence",
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("id", uuid_lib.uuid4())
        kwargs.setdefault("status", ClaimStatus.PENDING)
        kwargs.setdefault("submission_date", datetime.utcnow())
        super().__init__(**kwargs)

    # -- Amount ---------------------------------------------------------------

    @hybrid_property
    def total_amount(self) -> Decimal:
        return self._total_amount

    @validates("hours_worked", "hourly_rate")
    def _recalculate_on_factor_change(self, key: str, value: Any) -> Decimal | None:
        value = _to_decimal(value)
        hours = value if key == "hours_worked" else self.hours_worked
        rate = value if key == "hourly_rate" else self.hourly_rate
        if hours is not None and rate is not None:
            self._total_amount = hours * rate
        return value

    @validates("period")
    def _normalize_period(self, key: str, value: date) -> date:
        if isinstance(value, datetime):
            value = value.date()
        return value.replace(day=1)

    def calculate_total_amount(self) -> Decimal:
        """Recompute ``total_amount`` from the current hours and rate."""
        self._total_amount = _to_decimal(self.hours_worked) * _to_decimal(
            self.hourly_rate
        )
        return self._total_amount

    # -- Lifecycle ------------------------------------------------------------

    def transition(
        self,
        new_status: ClaimStatus,
        actor: Actor,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> ClaimStatusHistory:
        """Move the claim to ``new_status`` and append a history record.

        No transition rules are checked here and repeated targets are not
        deduplicated; callers decide whether a change is allowed before
        invoking this. Nothing is persisted.

        Args:
            new_status: Target status
            actor: Who makes the change (``SYSTEM_ACTOR`` for automation)
            notes: Optional free-text notes for the audit trail
            now: Timestamp to stamp, defaults to the current UTC time

        Returns:
            The appended history record
        """
        new_status = ClaimStatus(new_status)
        now = now or datetime.utcnow()
        old_status = self.status

        self.status = new_status

        if new_status in DECISION_STATUSES:
            self.approval_date = now
            self.stored_processing_days = (
                (now - self.submission_date).days
                if new_status == ClaimStatus.APPROVED
                else None
            )
        elif new_status in OPEN_STATUSES:
            self.approval_date = None
            self.stored_processing_days = None
        # PAID keeps the approval stamp of the decision it follows

        record = ClaimStatusHistory(
            claim_id=self.id,
            sequence=len(self.status_history) + 1,
            old_status=old_status,
            new_status=new_status,
            changed_by=actor.name,
            changed_by_id=actor.user_id,
            change_notes=notes,
            changed_date=now,
        )
        self.status_history.append(record)
        return record

    # -- Projections of the latest history record -----------------------------

    @property
    def latest_history(self) -> ClaimStatusHistory | None:
        return self.status_history[-1] if self.status_history else None

    @property
    def last_status_update(self) -> datetime | None:
        latest = self.latest_history
        return latest.changed_date if latest else None

    @property
    def reviewed_by(self) -> str | None:
        latest = self.latest_history
        return latest.changed_by if latest else None

    @property
    def review_notes(self) -> str | None:
        latest = self.latest_history
        return latest.change_notes if latest else None

    @property
    def decision_record(self) -> ClaimStatusHistory | None:
        """The approve/reject record the current approval date belongs to."""
        if self.approval_date is None:
            return None
        for record in reversed(self.status_history):
            if record.new_status in DECISION_STATUSES:
                return record
        return None

    @property
    def approved_by(self) -> str | None:
        record = self.decision_record
        return record.changed_by if record else None

    @property
    def approval_notes(self) -> str | None:
        record = self.decision_record
        return record.change_notes if record else None

    # -- Display helpers ------------------------------------------------------

    @property
    def processing_time(self) -> timedelta | None:
        if self.approval_date is None:
            return None
        return self.approval_date - self.submission_date

    @property
    def processing_days(self) -> float | None:
        delta = self.processing_time
        return delta.total_seconds() / 86400 if delta is not None else None

    @property
    def formatted_processing_time(self) -> str:
        return format_processing_time(self.processing_time)

    @property
    def formatted_period(self) -> str:
        return self.period.strftime("%B %Y")

    @property
    def status_badge_class(self) -> str:
        return status_badge_class(self.status)
