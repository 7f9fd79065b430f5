# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication service: password checks and cookie sessions for portal users."""

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from src.config import settings
from src.events import AppEvent, event_bus
from src.models import User
from src.models.session import Session as SessionModel
from src.security import verify_password

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> User | None:
    """Check a login attempt.

    Users deactivated by HR are refused even with the right password.
    The caller only learns that the login failed. The reason is logged.
    """
    user = get_user_by_username(db, username)
    if user is None:
        logger.info(f"Login refused for unknown user {username!r}")
        return None
    if not verify_password(password, user.hashed_password):
        logger.info(f"Login refused for {username}: wrong password")
        return None
    if not user.is_active:
        logger.warning(
            f"Login refused for {username}: account deactivated "
            f"({user.role.value}, {user.department or 'no department'})"
        )
        return None
    return user


def create_session(db: Session, user_id: uuid.UUID) -> str:
    """Create a new session for a user."""
    token = str(uuid.uuid4())
    expires_at = datetime.utcnow() + timedelta(days=settings.session_expiry_days)

    session = SessionModel(
        user_id=user_id,
        token=token,
        expires_at=expires_at,
    )
    db.add(session)
    db.commit()

    event_bus.publish_sync(AppEvent.USER_LOGIN, {"user_id": str(user_id)})

    return token


def get_session(db: Session, token: str) -> SessionModel | None:
    """Get a valid session by token."""
    session = db.query(SessionModel).filter(SessionModel.token == token).first()
    if not session:
        return None
    if session.is_expired():
        db.delete(session)
        db.commit()
        return None
    return session


def delete_session(db: Session, token: str) -> bool:
    """Delete a session by token."""
    session = db.query(SessionModel).filter(SessionModel.token == token).first()
    if session:
        user_id = session.user_id
        db.delete(session)
        db.commit()
        event_bus.publish_sync(AppEvent.USER_LOGOUT, {"user_id": str(user_id)})
        return True
    return False


def get_user_by_id(db: Session, user_id: uuid.UUID) -> User | None:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> User | None:
    """Get a user by username."""
    return db.query(User).filter(User.username == username).first()


def cleanup_expired_sessions(db: Session) -> int:
    """Delete all expired sessions. Returns count of deleted sessions."""
    count = (
        db.query(SessionModel)
        .filter(SessionModel.expires_at < datetime.utcnow())
        .delete()
    )
    db.commit()
    if count:
        logger.info(f"Removed {count} expired sessions")
    return count
