# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Claims portal settings.

    Values come from environment variables; a ``.env`` file in the working
    directory is read as well if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Lecturer Claims Portal"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./claims.db"

    cors_origins: list[str] = ["http://localhost:5173"]
    session_expiry_days: int = 7

    # Supporting document uploads
    upload_dir: str = "uploads"
    max_upload_size: int = 5 * 1024 * 1024  # 5MB
    allowed_upload_extensions: list[str] = [".pdf", ".docx", ".xlsx", ".jpg", ".png"]


settings = Settings()
