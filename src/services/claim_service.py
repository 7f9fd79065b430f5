# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Claim service: scoped queries, submission and status changes."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import false, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import StaleDataError

from src.events import AppEvent, event_bus
from src.models import Actor, Claim, ClaimStatus, ClaimStatusHistory, User
from src.rbac import user_has_permission
from src.schemas.claim import ClaimCreate, ClaimUpdate
from src.services.claim_workflow import (
    ClaimConflictError,
    ClaimNotEditableError,
    ClaimPersistenceError,
    ClaimWorkflowError,
    RedundantTransitionError,
    check_transition,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimScope:
    """Which claims a caller may load.

    ``lecturer_id`` limits to one lecturer's claims, ``department`` to
    claims of lecturers in that department. ``deny_all`` matches nothing.
    """

    lecturer_id: uuid.UUID | None = None
    department: str | None = None
    deny_all: bool = False

    @classmethod
    def for_user(cls, user: User) -> ClaimScope:
        if user_has_permission(user, "claim.view.all"):
            return cls()
        if user_has_permission(user, "claim.view.department"):
            if user.department:
                return cls(department=user.department)
            return cls(deny_all=True)
        if user_has_permission(user, "claim.view.own"):
            return cls(lecturer_id=user.id)
        return cls(deny_all=True)


UNRESTRICTED = ClaimScope()


@dataclass
class BulkStatusResult:
    """Per-claim outcome of a bulk status change."""

    changed: list[uuid.UUID] = field(default_factory=list)
    skipped: list[uuid.UUID] = field(default_factory=list)
    failed: list[tuple[uuid.UUID, str]] = field(default_factory=list)


def _scoped_query(db: Session, scope: ClaimScope) -> Query:
    query = db.query(Claim).join(Claim.lecturer)
    if scope.deny_all:
        query = query.filter(false())
    if scope.lecturer_id is not None:
        query = query.filter(Claim.lecturer_id == scope.lecturer_id)
    if scope.department is not None:
        query = query.filter(User.department == scope.department)
    return query


def get_claims(
    db: Session,
    scope: ClaimScope = UNRESTRICTED,
    status: ClaimStatus | None = None,
    department: str | None = None,
    period: date | None = None,
    lecturer: str | None = None,
) -> list[Claim]:
    """Get claims visible in ``scope``, newest submission first.

    Args:
        db: Database session
        scope: Role based visibility of the caller
        status: Only claims with this status
        department: Only claims of lecturers in this department
        period: Only claims for this month (any day of the month)
        lecturer: Case-insensitive substring of first name, last name or email
    """
    query = _scoped_query(db, scope)
    if status:
        query = query.filter(Claim.status == status)
    if department:
        query = query.filter(User.department == department)
    if period:
        query = query.filter(Claim.period == period.replace(day=1))
    if lecturer:
        term = f"%{lecturer.strip()}%"
        query = query.filter(
            or_(
                User.first_name.ilike(term),
                User.last_name.ilike(term),
                User.email.ilike(term),
            )
        )
    return query.order_by(Claim.submission_date.desc()).all()


def get_claim(
    db: Session,
    claim_id: uuid.UUID,
    scope: ClaimScope = UNRESTRICTED,
) -> Claim | None:
    """Get a claim by ID if it is visible in ``scope``."""
    return _scoped_query(db, scope).filter(Claim.id == claim_id).first()


def _commit(db: Session, claim_id: uuid.UUID) -> None:
    """Commit the claim aggregate, discarding the session state on failure."""
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Stale write rejected for claim {claim_id}")
        raise ClaimConflictError(claim_id) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save claim {claim_id}: {e}")
        raise ClaimPersistenceError(f"Could not save claim {claim_id}") from e


def create_claim(db: Session, lecturer: User, data: ClaimCreate) -> Claim:
    """Submit a new claim for a lecturer."""
    claim = Claim(
        lecturer_id=lecturer.id,
        period=data.period,
        hours_worked=data.hours_worked,
        hourly_rate=data.hourly_rate,
        additional_notes=data.additional_notes,
    )
    db.add(claim)
    _commit(db, claim.id)
    db.refresh(claim)

    logger.info(
        f"Claim {claim.id} submitted by {lecturer.username} "
        f"for {claim.formatted_period} ({claim.total_amount})"
    )
    event_bus.publish_sync(
        AppEvent.CLAIM_SUBMITTED,
        {
            "claim_id": str(claim.id),
            "lecturer_id": str(lecturer.id),
            "period": claim.period.isoformat(),
            "total_amount": str(claim.total_amount),
        },
    )

    return claim


def update_claim(
    db: Session,
    claim: Claim,
    data: ClaimUpdate,
    expected_version: int | None = None,
) -> Claim:
    """Edit a claim that is still pending. The total is recomputed."""
    if claim.status != ClaimStatus.PENDING:
        raise ClaimNotEditableError(
            f"Only pending claims can be edited (claim is {claim.status.label})"
        )
    if expected_version is not None and claim.version != expected_version:
        raise ClaimConflictError(claim.id)

    if data.period is not None:
        claim.period = data.period
    if data.hours_worked is not None:
        claim.hours_worked = data.hours_worked
    if data.hourly_rate is not None:
        claim.hourly_rate = data.hourly_rate
    if data.additional_notes is not None:
        claim.additional_notes = data.additional_notes

    claim_id = claim.id
    _commit(db, claim_id)
    db.refresh(claim)

    event_bus.publish_sync(
        AppEvent.CLAIM_UPDATED,
        {"claim_id": str(claim_id), "total_amount": str(claim.total_amount)},
    )

    return claim


def change_status(
    db: Session,
    claim: Claim,
    new_status: ClaimStatus,
    actor: Actor,
    notes: str | None = None,
    expected_version: int | None = None,
) -> ClaimStatusHistory:
    """Apply a checked status transition and persist the claim aggregate.

    Args:
        db: Database session
        claim: Claim loaded through a scoped query
        new_status: Target status
        actor: Who makes the change
        notes: Optional notes stored in the history record
        expected_version: Version the caller based its decision on

    Returns:
        The history record written for the change

    Raises:
        ClaimConflictError: ``expected_version`` is stale or a concurrent
            write won the race
        RedundantTransitionError: The claim already has ``new_status``
        InvalidTransitionError: The transition table forbids the change
        ClaimPersistenceError: The commit failed; nothing was saved
    """
    claim_id = claim.id
    if expected_version is not None and claim.version != expected_version:
        logger.warning(
            f"Claim {claim_id} version {claim.version} does not match "
            f"expected {expected_version}"
        )
        raise ClaimConflictError(claim_id)

    old_status = claim.status
    check_transition(old_status, new_status)

    record = claim.transition(new_status, actor, notes)
    _commit(db, claim_id)
    db.refresh(claim)

    logger.info(
        f"Claim {claim_id}: {old_status.label} -> {new_status.label} by {actor.name}"
    )
    event_bus.publish_sync(
        AppEvent.CLAIM_STATUS_CHANGED,
        {
            "claim_id": str(claim_id),
            "lecturer_id": str(claim.lecturer_id),
            "old_status": old_status.value,
            "new_status": new_status.value,
            "changed_by": actor.name,
            "system": actor.is_system,
        },
    )

    return record


def bulk_change_status(
    db: Session,
    claim_ids: list[uuid.UUID],
    new_status: ClaimStatus,
    actor: Actor,
    scope: ClaimScope = UNRESTRICTED,
    notes: str | None = None,
) -> BulkStatusResult:
    """Change the status of several claims, each in its own transaction.

    A failing claim never rolls back the others. Claims already in
    ``new_status`` are reported as skipped.
    """
    result = BulkStatusResult()

    for claim_id in dict.fromkeys(claim_ids):
        claim = get_claim(db, claim_id, scope)
        if claim is None:
            result.failed.append((claim_id, "Claim not found"))
            continue
        try:
            change_status(db, claim, new_status, actor, notes)
        except RedundantTransitionError:
            result.skipped.append(claim_id)
        except ClaimWorkflowError as e:
            result.failed.append((claim_id, str(e)))
        else:
            result.changed.append(claim_id)

    logger.info(
        f"Bulk {new_status.label} by {actor.name}: {len(result.changed)} changed, "
        f"{len(result.skipped)} skipped, {len(result.failed)} failed"
    )
    return result
