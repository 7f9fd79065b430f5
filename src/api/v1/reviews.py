# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Claim review API endpoints (approve, reject, review, payment)."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.deps import get_claim_scope, get_db, require_permission
from src.api.v1.claims import get_claim_or_404
from src.models import Actor, ClaimStatus, User
from src.rbac import user_has_permission
from src.schemas.claim import (
    BulkApproveRequest,
    BulkFailure,
    BulkStatusResponse,
    ClaimResponse,
    ReviewActionRequest,
    StatusChangeRequest,
    StatusChangeResponse,
)
from src.services import claim_service
from src.services.claim_service import ClaimScope
from src.services.claim_workflow import (
    ClaimConflictError,
    ClaimPersistenceError,
    InvalidTransitionError,
    RedundantTransitionError,
    required_permission,
)

router = APIRouter()
logger = logging.getLogger(__name__)

SUCCESS_MESSAGES = {
    ClaimStatus.PENDING: "Claim returned to pending.",
    ClaimStatus.UNDER_REVIEW: "Claim marked as under review.",
    ClaimStatus.APPROVED: "Claim approved successfully.",
    ClaimStatus.REJECTED: "Claim rejected.",
    ClaimStatus.PAID: "Claim marked as paid.",
}


def apply_status_change(
    db: Session,
    claim_id: uuid.UUID,
    new_status: ClaimStatus,
    current_user: User,
    scope: ClaimScope,
    notes: str | None,
    version: int | None,
) -> StatusChangeResponse:
    """Run a status change and translate workflow errors to HTTP answers."""
    permission = required_permission(new_status)
    if not user_has_permission(current_user, permission):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission denied: {permission}",
        )

    claim = get_claim_or_404(db, claim_id, scope)
    notes = notes.strip() if notes else None

    try:
        claim_service.change_status(
            db,
            claim,
            new_status,
            Actor.from_user(current_user),
            notes=notes,
            expected_version=version,
        )
    except RedundantTransitionError as e:
        return StatusChangeResponse(
            changed=False,
            message=str(e),
            claim=ClaimResponse.model_validate(claim),
        )
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except ClaimConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ClaimPersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating the claim status.",
        ) from e

    return StatusChangeResponse(
        changed=True,
        message=SUCCESS_MESSAGES[new_status],
        claim=ClaimResponse.model_validate(claim),
    )


@router.post("/bulk-approve", response_model=BulkStatusResponse)
def bulk_approve(
    data: BulkApproveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("claim.review")),
    scope: ClaimScope = Depends(get_claim_scope),
) -> BulkStatusResponse:
    """Approve several claims. Each claim succeeds or fails on its own."""
    result = claim_service.bulk_change_status(
        db,
        data.claim_ids,
        ClaimStatus.APPROVED,
        Actor.from_user(current_user),
        scope=scope,
        notes=data.notes,
    )
    return BulkStatusResponse(
        changed=result.changed,
        skipped=result.skipped,
        failed=[
            BulkFailure(claim_id=claim_id, reason=reason)
            for claim_id, reason in result.failed
        ],
    )


@router.post("/{claim_id}/approve", response_model=StatusChangeResponse)
def approve_claim(
    claim_id: uuid.UUID,
    data: ReviewActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("claim.review")),
    scope: ClaimScope = Depends(get_claim_scope),
) -> StatusChangeResponse:
    """Approve a claim."""
    return apply_status_change(
        db,
        claim_id,
        ClaimStatus.APPROVED,
        current_user,
        scope,
        data.notes,
        data.version,
    )


@router.post("/{claim_id}/reject", response_model=StatusChangeResponse)
def reject_claim(
    claim_id: uuid.UUID,
    data: ReviewActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("claim.review")),
    scope: ClaimScope = Depends(get_claim_scope),
) -> StatusChangeResponse:
    """Reject a claim. A reason is required."""
    if not data.notes or not data.notes.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rejection reason is required",
        )
    return apply_status_change(
        db,
        claim_id,
        ClaimStatus.REJECTED,
        current_user,
        scope,
        data.notes,
        data.version,
    )


@router.post("/{claim_id}/review", response_model=StatusChangeResponse)
def send_for_review(
    claim_id: uuid.UUID,
    data: ReviewActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("claim.review")),
    scope: ClaimScope = Depends(get_claim_scope),
) -> StatusChangeResponse:
    """Mark a claim as under review, e.g. when more information is requested."""
    return apply_status_change(
        db,
        claim_id,
        ClaimStatus.UNDER_REVIEW,
        current_user,
        scope,
        data.notes,
        data.version,
    )


@router.post("/{claim_id}/status", response_model=StatusChangeResponse)
def change_claim_status(
    claim_id: uuid.UUID,
    data: StatusChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("claim.review")),
    scope: ClaimScope = Depends(get_claim_scope),
) -> StatusChangeResponse:
    """Move a claim to any status the workflow allows from its current one."""
    if data.status == ClaimStatus.REJECTED and not (data.notes and data.notes.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rejection reason is required",
        )
    return apply_status_change(
        db,
        claim_id,
        data.status,
        current_user,
        scope,
        data.notes,
        data.version,
    )
