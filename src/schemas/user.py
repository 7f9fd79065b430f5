# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User schemas."""
import datetime
import re
import uuid

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.models.enums import UserRole

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.]+$")


class UserBase(BaseModel):
    """Base user schema."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    employee_id: str | None = Field(None, max_length=20)
    department: str | None = Field(None, max_length=100)
    role: UserRole = UserRole.LECTURER

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username must contain only alphanumeric characters, dots and underscores"
            )
        return v


class UserCreate(UserBase):
    """Schema for creating a user (HR use)."""

    password: str = Field(..., min_length=8)


class UserUpdate(BaseModel):
    """Schema for updating a user's details (HR use).

    Only fields present in the request are changed.
    """

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    employee_id: str | None = Field(None, max_length=20)
    department: str | None = Field(None, max_length=100)


class UserStatusUpdate(BaseModel):
    """Schema for activating or deactivating a user."""

    is_active: bool


class UserResponse(BaseModel):
    """Schema for user response."""

    id: uuid.UUID
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    employee_id: str | None
    department: str | None
    role: UserRole
    is_active: bool
    permissions: list[str] = []
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = {"from_attributes": True}
