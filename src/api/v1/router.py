# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from src.api.v1 import auth, claims, dashboard, reviews, users

api_router = APIRouter()

# Auth routes
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Dashboard routes
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])

# Review routes (registered first so /claims/bulk-approve is not taken for a claim id)
api_router.include_router(reviews.router, prefix="/claims", tags=["reviews"])

# Claim routes
api_router.include_router(claims.router, prefix="/claims", tags=["claims"])

# User management routes
api_router.include_router(users.router, tags=["users"])
