"""
Attempts and system alerts.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from cogni.domain.exam import Answer
from cogni.domain.user import generate_id, utcnow


class Attempt(BaseModel):
    """
    One user's submission against one exam.

    Created at submission time; moves from ungraded to graded at most once.
    """

    id: str = Field(default_factory=generate_id)
    user_id: str
    exam_id: str
    answers: Dict[str, Answer] = {}
    score: Optional[int] = Field(None, ge=0, le=100)
    is_graded: bool = False
    graded_by: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Alert(BaseModel):
    """Admin broadcast. Append-only."""

    id: str = Field(default_factory=generate_id)
    title: str
    message: str
    severity: AlertSeverity = AlertSeverity.LOW
    date: datetime = Field(default_factory=utcnow)
