"""Pydantic schemas package."""
from src.schemas.auth import AuthResponse, LoginRequest
from src.schemas.claim import (
    BulkApproveRequest,
    BulkFailure,
    BulkStatusResponse,
    ClaimCreate,
    ClaimDetailResponse,
    ClaimResponse,
    ClaimUpdate,
    ReviewActionRequest,
    StatusChangeRequest,
    StatusChangeResponse,
    StatusHistoryResponse,
)
from src.schemas.common import HealthResponse
from src.schemas.dashboard import DashboardSummary
from src.schemas.document import DocumentResponse
from src.schemas.user import UserCreate, UserResponse, UserStatusUpdate

__all__ = [
    "AuthResponse",
    "BulkApproveRequest",
    "BulkFailure",
    "BulkStatusResponse",
    "ClaimCreate",
    "ClaimDetailResponse",
    "ClaimResponse",
    "ClaimUpdate",
    "DashboardSummary",
    "DocumentResponse",
    "HealthResponse",
    "LoginRequest",
    "ReviewActionRequest",
    "StatusChangeRequest",
    "StatusChangeResponse",
    "StatusHistoryResponse",
    "UserCreate",
    "UserResponse",
    "UserStatusUpdate",
]
