# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from src.config import settings
from src.database import SessionLocal
from src.schemas.common import HealthResponse
from src.services import auth_service, document_service

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: make sure uploads can be stored and drop stale sessions
    upload_dir = document_service.get_upload_dir()
    logger.info(f"Storing supporting documents in {upload_dir.resolve()}")

    db = SessionLocal()
    try:
        removed = auth_service.cleanup_expired_sessions(db)
        if removed:
            logger.info(f"Removed {removed} expired sessions")
    except SQLAlchemyError as e:
        logger.warning(f"Could not clean up expired sessions: {e}")
    finally:
        db.close()

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="Submission, review and payment tracking for lecturer teaching-hours claims",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Import and include API router after it's created
from src.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
