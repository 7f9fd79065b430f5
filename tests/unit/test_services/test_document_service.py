# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for document_service."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from src.config import settings
from src.events import AppEvent, event_bus
from src.models import SupportingDocument
from src.services import document_service
from src.services.document_service import DocumentValidationError


def test_validate_upload_accepts_allowed_types():
    assert document_service.validate_upload("Timesheet.PDF", 1000) == ".pdf"
    assert document_service.validate_upload("scan.png", 1) == ".png"


@pytest.mark.parametrize(
    ("filename", "size", "message"),
    [
        ("empty.pdf", 0, "empty"),
        ("huge.pdf", 5 * 1024 * 1024 + 1, "less than 5MB"),
        ("script.exe", 100, "PDF, DOCX, XLSX, JPG, PNG"),
        ("noextension", 100, "PDF"),
    ],
)
def test_validate_upload_rejects(filename, size, message):
    with pytest.raises(DocumentValidationError, match=message):
        document_service.validate_upload(filename, size)


def test_maximum_size_is_allowed():
    document_service.validate_upload("max.pdf", settings.max_upload_size)


def test_content_type_for():
    assert document_service.content_type_for("a.docx").endswith(
        "wordprocessingml.document"
    )
    assert document_service.content_type_for("a.bin") == "application/octet-stream"


def test_save_document(db_session, claim, upload_dir):
    received = []
    event_bus.subscribe(AppEvent.DOCUMENT_UPLOADED, received.append)

    document = document_service.save_document(
        db_session,
        claim,
        "May timesheet.pdf",
        b"%PDF-1.7 test",
        uploaded_by="lecturer",
        description="Signed timesheet",
    )

    assert document.original_file_name == "May timesheet.pdf"
    assert document.file_name.endswith(".pdf")
    assert document.file_name != document.original_file_name
    assert document.content_type == "application/pdf"
    assert document.file_size == 13
    assert (upload_dir / document.file_name).read_bytes() == b"%PDF-1.7 test"
    assert document_service.get_document_path(document) == (
        upload_dir / document.file_name
    )
    assert [d.id for d in claim.supporting_documents] == [document.id]
    assert received[0].data["document_id"] == str(document.id)


def test_save_document_validation_attaches_nothing(db_session, claim, upload_dir):
    with pytest.raises(DocumentValidationError):
        document_service.save_document(
            db_session, claim, "virus.exe", b"MZ", uploaded_by="lecturer"
        )

    assert db_session.query(SupportingDocument).count() == 0
    assert not upload_dir.exists() or not any(upload_dir.iterdir())


def test_save_document_removes_file_when_commit_fails(
    db_session, claim, upload_dir, monkeypatch
):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(OperationalError):
        document_service.save_document(
            db_session, claim, "a.pdf", b"data", uploaded_by="lecturer"
        )

    assert not any(upload_dir.iterdir())


def test_get_document_checks_claim(db_session, claim, make_claim, lecturer):
    document = document_service.save_document(
        db_session, claim, "a.pdf", b"data", uploaded_by="lecturer"
    )
    other_claim = make_claim(lecturer, period="2025-06-01")

    assert document_service.get_document(db_session, claim.id, document.id) is not None
    assert document_service.get_document(db_session, other_claim.id, document.id) is None
    assert document_service.get_document(db_session, claim.id, uuid.uuid4()) is None
