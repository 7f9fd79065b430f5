# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication schemas."""

from pydantic import BaseModel, Field

from src.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Schema for login."""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Schema returned after a successful login."""

    user: UserResponse
    message: str = "Login successful"
