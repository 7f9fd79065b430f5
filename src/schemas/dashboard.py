# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Dashboard schemas."""

from decimal import Decimal

from pydantic import BaseModel


class DashboardSummary(BaseModel):
    """Claim counts and totals visible to the current user."""

    total_claims: int
    status_counts: dict[str, int]
    open_claims: int
    approved_this_month: int
    approved_amount_this_month: Decimal
    average_processing_days: float | None
