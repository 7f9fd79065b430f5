# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User management service (HR)."""

import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Session

from src.events import AppEvent, event_bus
from src.models import User
from src.models.enums import UserRole
from src.schemas.user import UserCreate, UserUpdate
from src.security import get_password_hash

logger = logging.getLogger(__name__)


class UserExistsError(ValueError):
    """Raised when the username or email is already taken."""


def get_users(
    db: Session,
    role: UserRole | None = None,
    department: str | None = None,
) -> list[User]:
    """List users, optionally filtered by role and department."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if department:
        query = query.filter(User.department == department)
    return query.order_by(User.department, User.last_name, User.first_name).all()


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_departments(db: Session) -> list[str]:
    """Distinct departments that have at least one user."""
    rows = (
        db.query(User.department)
        .filter(User.department.is_not(None))
        .distinct()
        .order_by(User.department)
        .all()
    )
    return [row[0] for row in rows]


def create_user(db: Session, data: UserCreate) -> User:
    """Create a portal user."""
    existing = (
        db.query(User)
        .filter(or_(User.username == data.username, User.email == data.email))
        .first()
    )
    if existing:
        raise UserExistsError("A user with this username or email already exists")

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        employee_id=data.employee_id,
        department=data.department,
        role=data.role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Created {user.role.value} user {user.username}")
    event_bus.publish_sync(
        AppEvent.USER_CREATED,
        {"user_id": str(user.id), "username": user.username, "role": user.role.value},
    )

    return user


def set_user_active(db: Session, user: User, is_active: bool) -> User:
    """Activate or deactivate a user."""
    user.is_active = is_active
    db.commit()
    db.refresh(user)

    event_bus.publish_sync(
        AppEvent.USER_UPDATED,
        {"user_id": str(user.id), "is_active": is_active},
    )

    return user


def update_user(db: Session, user: User, data: UserUpdate) -> User:
    """Update a user's personal and department details.

    A department change moves the user's claims into the scope of that
    department's coordinators.
    """
    changes = data.model_dump(exclude_unset=True)

    for field in ("email", "first_name", "last_name"):
        if field in changes and changes[field] is None:
            raise ValueError(f"{field} cannot be cleared")

    if changes.get("email") and changes["email"] != user.email:
        existing = (
            db.query(User)
            .filter(User.email == changes["email"], User.id != user.id)
            .first()
        )
        if existing:
            raise UserExistsError("Email already in use")

    old_department = user.department
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    if user.department != old_department:
        logger.info(
            f"Moved user {user.username} from department "
            f"{old_department} to {user.department}"
        )
    event_bus.publish_sync(
        AppEvent.USER_UPDATED,
        {"user_id": str(user.id), "fields": sorted(changes)},
    )

    return user
