"""
User profile and score history.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

# Level ceiling shared by placement and the XP curve
MAX_LEVEL = 10

# Starting level for accounts that never take the placement exam
PRIVILEGED_DEFAULT_LEVEL = 5


def generate_id() -> str:
    """Generate a new opaque entity id."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    """User roles in the system."""
    CITIZEN = "CITIZEN"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class ScoreRecord(BaseModel):
    """One finalized score, appended on every successful advancement."""

    content_id: str
    exam_id: str
    score: int
    date: datetime


class User(BaseModel):
    """A platform account. `level` is derived state, see ProgressionEngine."""

    id: str = Field(default_factory=generate_id)
    name: str
    email: str
    role: UserRole = UserRole.CITIZEN
    level: int = Field(0, ge=0, le=MAX_LEVEL)
    xp: int = Field(0, ge=0)
    score_history: List[ScoreRecord] = []

    @property
    def is_privileged(self) -> bool:
        return self.role in (UserRole.TEACHER, UserRole.ADMIN)

    @property
    def needs_placement(self) -> bool:
        return self.role == UserRole.CITIZEN and self.level == 0
