# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Actor identity recorded on claim status transitions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.models.user import User


@dataclass(frozen=True)
class Actor:
    """Who performed a transition.

    ``name`` is what ends up in the audit trail; ``user_id`` links back to
    the portal user when the change was made by a logged-in person.
    """

    name: str
    user_id: uuid.UUID | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Actor name must not be empty")

    @classmethod
    def from_user(cls, user: User) -> Actor:
        return cls(name=user.username, user_id=user.id)

    @property
    def is_system(self) -> bool:
        return self.user_id is None and self.name == SYSTEM_ACTOR_NAME


SYSTEM_ACTOR_NAME = "system"

# Used for transitions not triggered by an authenticated user (imports, scripts)
SYSTEM_ACTOR = Actor(name=SYSTEM_ACTOR_NAME)
