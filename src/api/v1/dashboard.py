# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Dashboard API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.deps import get_claim_scope, get_db
from src.schemas.dashboard import DashboardSummary
from src.services import dashboard_service
from src.services.claim_service import ClaimScope

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def get_dashboard_summary(
    db: Session = Depends(get_db),
    scope: ClaimScope = Depends(get_claim_scope),
) -> DashboardSummary:
    """Get aggregated claim figures for the current user.

    Returns counts per status, the open queue size, and the number and
    total of claims approved this month.
    """
    return dashboard_service.get_summary(db, scope)
