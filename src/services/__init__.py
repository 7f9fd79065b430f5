"""Services package."""
from src.services import (
    auth_service,
    claim_service,
    claim_workflow,
    dashboard_service,
    document_service,
    user_service,
)

__all__ = [
    "auth_service",
    "claim_service",
    "claim_workflow",
    "dashboard_service",
    "document_service",
    "user_service",
]
