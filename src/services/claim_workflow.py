# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Allowed claim status transitions and workflow errors."""

import uuid

from src.models.enums import ClaimStatus

# Forward transitions reviewers may perform. Same-status targets are never
# listed here; they are reported as redundant instead.
ALLOWED_TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    ClaimStatus.PENDING: frozenset(
        {ClaimStatus.UNDER_REVIEW, ClaimStatus.APPROVED, ClaimStatus.REJECTED}
    ),
    ClaimStatus.UNDER_REVIEW: frozenset(
        {ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.PENDING}
    ),
    ClaimStatus.APPROVED: frozenset({ClaimStatus.PAID}),
    ClaimStatus.REJECTED: frozenset(),
    ClaimStatus.PAID: frozenset(),
}


class ClaimWorkflowError(Exception):
    """Base error for claim operations rejected by the service layer."""


class InvalidTransitionError(ClaimWorkflowError):
    """Raised when the transition table forbids a status change."""

    def __init__(self, old_status: ClaimStatus, new_status: ClaimStatus) -> None:
        self.old_status = old_status
        self.new_status = new_status
        super().__init__(
            f"Cannot move a claim from {old_status.label} to {new_status.label}"
        )


class RedundantTransitionError(ClaimWorkflowError):
    """Raised when a claim already has the requested status."""

    def __init__(self, status: ClaimStatus) -> None:
        self.status = status
        super().__init__(f"Claim is already {status.label.lower()}.")


class ClaimConflictError(ClaimWorkflowError):
    """Raised when a claim was modified concurrently (stale version)."""

    def __init__(self, claim_id: uuid.UUID) -> None:
        self.claim_id = claim_id
        super().__init__(
            f"Claim {claim_id} was modified by someone else; reload and try again"
        )


class ClaimPersistenceError(ClaimWorkflowError):
    """Raised when saving a claim aggregate fails."""


class ClaimNotEditableError(ClaimWorkflowError):
    """Raised when a lecturer edits a claim that is no longer pending."""


def allowed_targets(status: ClaimStatus) -> frozenset[ClaimStatus]:
    """Get the statuses a claim in ``status`` may move to."""
    return ALLOWED_TRANSITIONS.get(status, frozenset())


def can_transition(old_status: ClaimStatus, new_status: ClaimStatus) -> bool:
    return new_status in allowed_targets(old_status)


def check_transition(old_status: ClaimStatus, new_status: ClaimStatus) -> None:
    """Raise if moving from ``old_status`` to ``new_status`` is not allowed.

    Raises:
        RedundantTransitionError: The claim already has ``new_status``
        InvalidTransitionError: The table has no such edge
    """
    if old_status == new_status:
        raise RedundantTransitionError(new_status)
    if not can_transition(old_status, new_status):
        raise InvalidTransitionError(old_status, new_status)


def required_permission(new_status: ClaimStatus) -> str:
    """Permission code needed to move a claim into ``new_status``."""
    if new_status == ClaimStatus.PAID:
        return "claim.pay"
    return "claim.review"
