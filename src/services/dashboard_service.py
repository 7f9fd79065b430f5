# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Dashboard service for aggregated summary data."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import false, func
from sqlalchemy.orm import Session

from src.models import Claim, ClaimStatus, User
from src.schemas.dashboard import DashboardSummary
from src.services.claim_service import UNRESTRICTED, ClaimScope


def _scope_filters(scope: ClaimScope) -> list:
    filters = []
    if scope.deny_all:
        filters.append(false())
    if scope.lecturer_id is not None:
        filters.append(Claim.lecturer_id == scope.lecturer_id)
    if scope.department is not None:
        filters.append(User.department == scope.department)
    return filters


def get_status_counts(db: Session, scope: ClaimScope = UNRESTRICTED) -> dict[str, int]:
    """Count claims per status. Every status is present, zero if unused."""
    counts = (
        db.query(Claim.status, func.count(Claim.id))
        .join(Claim.lecturer)
        .filter(*_scope_filters(scope))
        .group_by(Claim.status)
        .all()
    )

    result = {status.value: 0 for status in ClaimStatus}
    for status, count in counts:
        result[ClaimStatus(status).value] = count
    return result


def get_summary(
    db: Session,
    scope: ClaimScope = UNRESTRICTED,
    now: datetime | None = None,
) -> DashboardSummary:
    """Get the dashboard summary for the claims visible in ``scope``.

    "Approved this month" counts claims decided as approved since the
    first of the current month, including those already paid.
    """
    now = now or datetime.utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    filters = _scope_filters(scope)

    status_counts = get_status_counts(db, scope)

    approved_count, approved_amount = (
        db.query(func.count(Claim.id), func.sum(Claim.total_amount))
        .join(Claim.lecturer)
        .filter(
            *filters,
            Claim.status.in_([ClaimStatus.APPROVED, ClaimStatus.PAID]),
            Claim.approval_date >= month_start,
        )
        .one()
    )

    average_days = (
        db.query(func.avg(Claim.stored_processing_days))
        .join(Claim.lecturer)
        .filter(*filters, Claim.stored_processing_days.is_not(None))
        .scalar()
    )

    return DashboardSummary(
        total_claims=sum(status_counts.values()),
        status_counts=status_counts,
        open_claims=status_counts[ClaimStatus.PENDING.value]
        + status_counts[ClaimStatus.UNDER_REVIEW.value],
        approved_this_month=approved_count or 0,
        approved_amount_this_month=Decimal(str(approved_amount or 0)),
        average_processing_days=(
            round(float(average_days), 1) if average_days is not None else None
        ),
    )
