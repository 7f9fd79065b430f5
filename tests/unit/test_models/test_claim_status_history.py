# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for status history records and document helpers."""

from datetime import datetime, timedelta

import pytest

from src.models import ClaimStatus, ClaimStatusHistory, SupportingDocument
from src.models.claim_status_history import format_time_ago
from src.models.supporting_document import format_file_size

NOW = datetime(2025, 6, 10, 12, 0, 0)


@pytest.mark.parametrize(
    ("elapsed", "expected"),
    [
        (timedelta(seconds=10), "Just now"),
        (timedelta(minutes=30), "30m ago"),
        (timedelta(hours=5), "5h ago"),
        (timedelta(days=2), "2d ago"),
        (timedelta(hours=23, minutes=59), "23h ago"),
    ],
)
def test_format_time_ago(elapsed, expected):
    assert format_time_ago(NOW - elapsed, now=NOW) == expected


def test_status_change_uses_labels():
    record = ClaimStatusHistory(
        sequence=1,
        old_status=ClaimStatus.PENDING,
        new_status=ClaimStatus.UNDER_REVIEW,
        changed_by="mgr1",
        changed_date=NOW,
    )
    assert record.status_change == "Pending → Under Review"
    assert record.time_ago(now=NOW + timedelta(minutes=3)) == "3m ago"


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (512, "512 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (int(1.25 * 1024 * 1024), "1.25 MB"),
        (5 * 1024 * 1024 * 1024, "5 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


@pytest.mark.parametrize(
    ("content_type", "icon", "is_image"),
    [
        ("application/pdf", "fas fa-file-pdf text-danger", False),
        ("image/png", "fas fa-file-image text-info", True),
        (
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "fas fa-file-excel text-success",
            False,
        ),
        ("application/octet-stream", "fas fa-file text-secondary", False),
    ],
)
def test_document_icon(content_type, icon, is_image):
    document = SupportingDocument(content_type=content_type, file_size=10)
    assert document.file_icon == icon
    assert document.is_image is is_image
