# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Supporting document upload and retrieval."""

import logging
import uuid
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.config import settings
from src.events import AppEvent, event_bus
from src.models import Claim, SupportingDocument

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".jpg": "image/jpeg",
    ".png": "image/png",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class DocumentValidationError(ValueError):
    """Raised when an upload violates the size or file type policy."""


def content_type_for(filename: str) -> str:
    """Guess the content type from the file extension."""
    return CONTENT_TYPES.get(Path(filename).suffix.lower(), DEFAULT_CONTENT_TYPE)


def validate_upload(filename: str, size: int) -> str:
    """Check an upload against the policy and return its lowercase extension.

    Raises:
        DocumentValidationError: Empty, too large or disallowed type
    """
    if size <= 0:
        raise DocumentValidationError("File is empty")
    if size > settings.max_upload_size:
        limit_mb = settings.max_upload_size // (1024 * 1024)
        raise DocumentValidationError(f"File size must be less than {limit_mb}MB")

    extension = Path(filename).suffix.lower()
    if extension not in settings.allowed_upload_extensions:
        allowed = ", ".join(
            ext.lstrip(".").upper() for ext in settings.allowed_upload_extensions
        )
        raise DocumentValidationError(f"Please upload {allowed} files only")
    return extension


def get_upload_dir() -> Path:
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def save_document(
    db: Session,
    claim: Claim,
    filename: str,
    content: bytes,
    uploaded_by: str,
    content_type: str | None = None,
    description: str | None = None,
) -> SupportingDocument:
    """Store an uploaded file and attach a reference to the claim.

    Args:
        db: Database session
        claim: Claim to attach the document to
        filename: Original file name as sent by the client
        content: File bytes
        uploaded_by: Username of the uploader
        content_type: Content type sent by the client, guessed if missing
        description: Optional short description

    Returns:
        The created SupportingDocument
    """
    extension = validate_upload(filename, len(content))

    stored_name = f"{uuid.uuid4()}{extension}"
    path = get_upload_dir() / stored_name
    path.write_bytes(content)

    document = SupportingDocument(
        claim_id=claim.id,
        original_file_name=Path(filename).name,
        file_name=stored_name,
        file_size=len(content),
        content_type=content_type or content_type_for(filename),
        description=description,
        uploaded_by=uploaded_by,
    )
    db.add(document)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        path.unlink(missing_ok=True)
        logger.error(f"Failed to attach document {filename} to claim {claim.id}")
        raise
    db.refresh(document)

    event_bus.publish_sync(
        AppEvent.DOCUMENT_UPLOADED,
        {
            "claim_id": str(document.claim_id),
            "document_id": str(document.id),
            "file_size": document.file_size,
        },
    )

    return document


def get_document(
    db: Session, claim_id: uuid.UUID, document_id: uuid.UUID
) -> SupportingDocument | None:
    """Get a document that belongs to a specific claim."""
    return (
        db.query(SupportingDocument)
        .filter(
            SupportingDocument.id == document_id,
            SupportingDocument.claim_id == claim_id,
        )
        .first()
    )


def get_document_path(document: SupportingDocument) -> Path:
    """Location of the stored file for a document reference."""
    return Path(settings.upload_dir) / document.file_name
