# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Supporting document schemas."""

import datetime
import uuid

from pydantic import BaseModel


class DocumentResponse(BaseModel):
    """Schema for supporting document response."""

    id: uuid.UUID
    claim_id: uuid.UUID
    original_file_name: str
    file_size: int
    file_size_formatted: str
    content_type: str
    file_icon: str
    is_image: bool
    description: str | None
    upload_date: datetime.datetime
    uploaded_by: str

    model_config = {"from_attributes": True}
