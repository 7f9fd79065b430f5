# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Supporting document attached to a claim."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base

if TYPE_CHECKING:
    from src.models.claim import Claim

SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Format a byte count like ``1.5 MB`` (at most two decimals)."""
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    number = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{number} {SIZE_UNITS[unit]}"


class SupportingDocument(Base):
    """Reference to an uploaded file; the bytes live in the upload directory."""

    __tablename__ = "supporting_documents"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    claim_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    original_file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)  # stored name
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    upload_date: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    uploaded_by: Mapped[str] = mapped_column(String(100), nullable=False)

    claim: Mapped[Claim] = relationship(
        "Claim", back_populates="supporting_documents"
    )

    @property
    def file_size_formatted(self) -> str:
        return format_file_size(self.file_size)

    @property
    def file_icon(self) -> str:
        content_type = self.content_type or ""
        if "pdf" in content_type:
            return "fas fa-file-pdf text-danger"
        if "word" in content_type:
            return "fas fa-file-word text-primary"
        if "excel" in content_type or "spreadsheet" in content_type:
            return "fas fa-file-excel text-success"
        if "image" in content_type:
            return "fas fa-file-image text-info"
        return "fas fa-file text-secondary"

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").startswith("image/")
