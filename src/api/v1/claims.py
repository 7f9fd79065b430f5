# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Claim API endpoints."""

import datetime
import logging
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.api.deps import get_claim_scope, get_current_user, get_db, require_permission
from src.models import Claim, ClaimStatus, User
from src.schemas.claim import (
    ClaimCreate,
    ClaimDetailResponse,
    ClaimResponse,
    ClaimUpdate,
    StatusHistoryResponse,
    parse_period,
)
from src.schemas.document import DocumentResponse
from src.services import claim_service, document_service
from src.services.claim_service import ClaimScope
from src.services.claim_workflow import (
    ClaimConflictError,
    ClaimNotEditableError,
    ClaimPersistenceError,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def get_claim_or_404(db: Session, claim_id: uuid.UUID, scope: ClaimScope) -> Claim:
    """Load a claim visible to the caller or answer 404."""
    claim = claim_service.get_claim(db, claim_id, scope)
    if not claim:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Claim not found",
        )
    return claim


@router.get("", response_model=list[ClaimResponse])
def list_claims(
    claim_status: ClaimStatus | None = Query(None, alias="status"),
    department: str | None = None,
    period: str | None = None,
    lecturer: str | None = None,
    db: Session = Depends(get_db),
    scope: ClaimScope = Depends(get_claim_scope),
) -> list[ClaimResponse]:
    """List claims visible to the current user.

    ``period`` takes the form ``YYYY-MM``. ``lecturer`` matches part of
    the lecturer's name or email.
    """
    period_date = None
    if period:
        try:
            period_date = parse_period(period)
        except ValueError:
            period_date = None
        if not isinstance(period_date, datetime.date):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Period must be given as YYYY-MM",
            )

    claims = claim_service.get_claims(
        db,
        scope,
        status=claim_status,
        department=department,
        period=period_date,
        lecturer=lecturer,
    )
    return [ClaimResponse.model_validate(c) for c in claims]


@router.post("", response_model=ClaimResponse, status_code=status.HTTP_201_CREATED)
def create_claim(
    data: ClaimCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("claim.submit")),
) -> ClaimResponse:
    """Submit a new claim for the current lecturer."""
    try:
        claim = claim_service.create_claim(db, current_user, data)
    except ClaimPersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
    return ClaimResponse.model_validate(claim)


@router.get("/{claim_id}", response_model=ClaimDetailResponse)
def get_claim(
    claim_id: uuid.UUID,
    db: Session = Depends(get_db),
    scope: ClaimScope = Depends(get_claim_scope),
) -> ClaimDetailResponse:
    """Get a claim with its supporting documents and status history."""
    claim = get_claim_or_404(db, claim_id, scope)
    return ClaimDetailResponse.model_validate(claim)


@router.put("/{claim_id}", response_model=ClaimResponse)
def update_claim(
    claim_id: uuid.UUID,
    data: ClaimUpdate,
    version: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    scope: ClaimScope = Depends(get_claim_scope),
) -> ClaimResponse:
    """Edit a pending claim. Only the submitting lecturer may edit."""
    claim = get_claim_or_404(db, claim_id, scope)
    if claim.lecturer_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the submitting lecturer can edit a claim",
        )

    try:
        claim = claim_service.update_claim(db, claim, data, expected_version=version)
    except ClaimNotEditableError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except ClaimConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ClaimPersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    return ClaimResponse.model_validate(claim)


@router.get("/{claim_id}/history", response_model=list[StatusHistoryResponse])
def get_claim_history(
    claim_id: uuid.UUID,
    db: Session = Depends(get_db),
    scope: ClaimScope = Depends(get_claim_scope),
) -> list[StatusHistoryResponse]:
    """Get the status history of a claim, newest first."""
    claim = get_claim_or_404(db, claim_id, scope)
    records = sorted(claim.status_history, key=lambda r: r.sequence, reverse=True)
    return [StatusHistoryResponse.model_validate(r) for r in records]


@router.post(
    "/{claim_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    claim_id: uuid.UUID,
    file: UploadFile = File(...),
    description: str | None = Form(None, max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("document.upload")),
    scope: ClaimScope = Depends(get_claim_scope),
) -> DocumentResponse:
    """Attach a supporting document to a claim."""
    claim = get_claim_or_404(db, claim_id, scope)

    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )

    content = await file.read()
    try:
        document = document_service.save_document(
            db,
            claim,
            file.filename,
            content,
            uploaded_by=current_user.username,
            content_type=file.content_type,
            description=description,
        )
    except document_service.DocumentValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except SQLAlchemyError as e:
        logger.error(f"Document upload failed for claim {claim_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not save document",
        ) from e

    return DocumentResponse.model_validate(document)


@router.get("/{claim_id}/documents/{document_id}")
def download_document(
    claim_id: uuid.UUID,
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    scope: ClaimScope = Depends(get_claim_scope),
) -> FileResponse:
    """Download a supporting document."""
    claim = get_claim_or_404(db, claim_id, scope)
    document = document_service.get_document(db, claim.id, document_id)
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )

    path = document_service.get_document_path(document)
    if not path.is_file():
        logger.warning(f"Stored file missing for document {document_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document file not found",
        )

    return FileResponse(
        path,
        media_type=document.content_type,
        filename=document.original_file_name,
    )
