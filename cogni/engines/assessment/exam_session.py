"""
Exam session - the countdown around one in-progress attempt.

cancel (user) discards the session, no attempt is created.
expire (timer) and submit (user) finalize it exactly once.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Set

from pydantic import BaseModel, Field

from cogni.domain.errors import InvalidInputError
from cogni.domain.exam import Answer, Exam
from cogni.domain.user import generate_id, utcnow


class SessionState(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


_TRANSITIONS: Dict[SessionState, Set[SessionState]] = {
    SessionState.IN_PROGRESS: {SessionState.SUBMITTED, SessionState.EXPIRED, SessionState.CANCELLED},
}

FINAL_STATES = {SessionState.SUBMITTED, SessionState.EXPIRED}


class ExamSession(BaseModel):
    """An exam being taken. Holds answers until it is finalized."""

    id: str = Field(default_factory=generate_id)
    user_id: str
    exam_id: str
    started_at: datetime
    time_limit_seconds: int
    answers: Dict[str, Answer] = {}
    state: SessionState = SessionState.IN_PROGRESS
    attempt_id: Optional[str] = None
    retake: bool = False

    @classmethod
    def start(
        cls,
        user_id: str,
        exam: Exam,
        now: Optional[datetime] = None,
        retake: bool = False,
    ) -> "ExamSession":
        return cls(
            user_id=user_id,
            exam_id=exam.id,
            started_at=now or utcnow(),
            time_limit_seconds=exam.time_limit * 60,
            retake=retake,
        )

    @property
    def deadline(self) -> datetime:
        return self.started_at + timedelta(seconds=self.time_limit_seconds)

    @property
    def is_open(self) -> bool:
        return self.state == SessionState.IN_PROGRESS

    @property
    def is_finalized(self) -> bool:
        return self.state in FINAL_STATES

    def remaining_seconds(self, now: Optional[datetime] = None) -> int:
        left = (self.deadline - (now or utcnow())).total_seconds()
        return max(0, int(left))

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        return self.is_open and self.deadline <= (now or utcnow())

    def record_answer(self, question_id: str, answer: Answer, now: Optional[datetime] = None) -> None:
        if not self.is_open:
            raise InvalidInputError(f"session {self.id} is {self.state.value}")
        if self.is_overdue(now):
            raise InvalidInputError(f"session {self.id} ran out of time")
        self.answers[question_id] = answer

    def _move(self, to_state: SessionState) -> None:
        if to_state not in _TRANSITIONS.get(self.state, set()):
            raise InvalidInputError(
                f"Invalid session transition: {self.state.value} -> {to_state.value}"
            )
        self.state = to_state

    def cancel(self) -> None:
        """Discard the session. Nothing is recorded."""
        self._move(SessionState.CANCELLED)

    def finalize(self, expired: bool = False) -> bool:
        """
        Mark the session as submitted (or expired).

        Returns:
            True on the first call, False when the session was already finalized
            so the caller must not create a second attempt.
        """
        if self.is_finalized:
            return False
        self._move(SessionState.EXPIRED if expired else SessionState.SUBMITTED)
        return True
