"""
Pydantic schemas for API request/response validation.
"""

from cogni.schemas.common import ErrorResponse, HealthResponse, SuccessResponse
from cogni.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from cogni.schemas.content import (
    ContentActiveUpdate,
    ContentCreate,
    ExamCreate,
    ExamView,
    QuestionView,
)
from cogni.schemas.exam import (
    AnswerRequest,
    ExamSessionResponse,
    ScenarioChoiceRequest,
    StartExamRequest,
    SubmitAttemptRequest,
)
from cogni.schemas.grading import GradeRequest
from cogni.schemas.admin import AlertCreate, InsightResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "ContentActiveUpdate",
    "ContentCreate",
    "ExamCreate",
    "ExamView",
    "QuestionView",
    "AnswerRequest",
    "ExamSessionResponse",
    "ScenarioChoiceRequest",
    "StartExamRequest",
    "SubmitAttemptRequest",
    "GradeRequest",
    "AlertCreate",
    "InsightResponse",
]
