# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Claim schemas."""

import datetime
import re
import uuid
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.models.enums import ClaimStatus
from src.schemas.document import DocumentResponse

PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_period(value: Any) -> Any:
    """Accept ``YYYY-MM`` strings in addition to full dates."""
    if isinstance(value, str):
        match = PERIOD_PATTERN.match(value.strip())
        if match:
            return datetime.date(int(match.group(1)), int(match.group(2)), 1)
    return value


class ClaimBase(BaseModel):
    """Base claim schema."""

    period: datetime.date
    hours_worked: Decimal = Field(..., ge=Decimal("0.1"), le=200, decimal_places=2)
    hourly_rate: Decimal = Field(..., ge=50, le=1000, decimal_places=2)
    additional_notes: str | None = Field(None, max_length=1000)

    @field_validator("period", mode="before")
    @classmethod
    def validate_period_format(cls, v: Any) -> Any:
        return parse_period(v)

    @field_validator("period")
    @classmethod
    def validate_period(cls, v: datetime.date) -> datetime.date:
        """Normalize to the first day of the month."""
        return v.replace(day=1)


class ClaimCreate(ClaimBase):
    """Schema for submitting a claim."""


class ClaimUpdate(BaseModel):
    """Schema for editing a pending claim."""

    period: datetime.date | None = None
    hours_worked: Decimal | None = Field(
        None, ge=Decimal("0.1"), le=200, decimal_places=2
    )
    hourly_rate: Decimal | None = Field(None, ge=50, le=1000, decimal_places=2)
    additional_notes: str | None = Field(None, max_length=1000)

    @field_validator("period", mode="before")
    @classmethod
    def validate_period_format(cls, v: Any) -> Any:
        return parse_period(v)


class LecturerSummary(BaseModel):
    """Lecturer details shown next to a claim."""

    id: uuid.UUID
    full_name: str
    email: str
    department: str | None

    model_config = {"from_attributes": True}


class StatusHistoryResponse(BaseModel):
    """Schema for one status history record."""

    id: uuid.UUID
    sequence: int
    old_status: ClaimStatus
    new_status: ClaimStatus
    status_change: str
    changed_by: str
    change_notes: str | None
    changed_date: datetime.datetime
    duration: str

    model_config = {"from_attributes": True}


class ClaimResponse(BaseModel):
    """Schema for claim response."""

    id: uuid.UUID
    lecturer_id: uuid.UUID
    lecturer: LecturerSummary
    period: datetime.date
    formatted_period: str
    hours_worked: Decimal
    hourly_rate: Decimal
    total_amount: Decimal
    additional_notes: str | None
    status: ClaimStatus
    status_badge_class: str
    submission_date: datetime.datetime
    approval_date: datetime.datetime | None
    approved_by: str | None
    approval_notes: str | None
    last_status_update: datetime.datetime | None
    reviewed_by: str | None
    review_notes: str | None
    stored_processing_days: int | None
    processing_days: float | None
    formatted_processing_time: str
    version: int
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = {"from_attributes": True}


class ClaimDetailResponse(ClaimResponse):
    """Claim with its documents and status history (newest first)."""

    supporting_documents: list[DocumentResponse] = []
    status_history: list[StatusHistoryResponse] = []

    @field_validator("status_history")
    @classmethod
    def newest_first(
        cls, v: list[StatusHistoryResponse]
    ) -> list[StatusHistoryResponse]:
        return sorted(v, key=lambda record: record.sequence, reverse=True)


# Status change schemas


class ReviewActionRequest(BaseModel):
    """Body for approve / reject / send-for-review actions."""

    notes: str | None = Field(None, max_length=500)
    version: int | None = None


class StatusChangeRequest(ReviewActionRequest):
    """Body for moving a claim to an arbitrary status."""

    status: ClaimStatus


class StatusChangeResponse(BaseModel):
    """Result of a status change request."""

    changed: bool
    message: str
    claim: ClaimResponse


class BulkApproveRequest(BaseModel):
    """Schema for approving several claims at once."""

    claim_ids: list[uuid.UUID] = Field(..., min_length=1)
    notes: str | None = Field(None, max_length=500)


class BulkFailure(BaseModel):
    """A claim that could not be changed during a bulk action."""

    claim_id: uuid.UUID
    reason: str


class BulkStatusResponse(BaseModel):
    """Per-claim outcome of a bulk status change."""

    changed: list[uuid.UUID]
    skipped: list[uuid.UUID]
    failed: list[BulkFailure]
