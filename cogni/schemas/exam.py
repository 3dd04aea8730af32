"""
Exam taking and scenario schemas.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

from cogni.domain.exam import Answer
from cogni.engines.assessment.exam_session import ExamSession, SessionState


class StartExamRequest(BaseModel):
    retake: bool = False


class AnswerRequest(BaseModel):
    """One answer recorded into an open exam session."""

    question_id: str
    answer: Answer


class SubmitAttemptRequest(BaseModel):
    """Submit all answers at once, without a timed session."""

    answers: Dict[str, Answer] = {}
    retake: bool = False


class ExamSessionResponse(BaseModel):
    id: str
    exam_id: str
    state: SessionState
    started_at: datetime
    deadline: datetime
    remaining_seconds: int
    answers: Dict[str, Answer]
    attempt_id: Optional[str] = None

    @classmethod
    def from_session(cls, session: ExamSession) -> "ExamSessionResponse":
        return cls(
            id=session.id,
            exam_id=session.exam_id,
            state=session.state,
            started_at=session.started_at,
            deadline=session.deadline,
            remaining_seconds=session.remaining_seconds(),
            answers=session.answers,
            attempt_id=session.attempt_id,
        )


class ScenarioChoiceRequest(BaseModel):
    choice_index: int
