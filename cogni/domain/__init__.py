"""
Domain model: users, content, exams, attempts, alerts and the error taxonomy.
"""

from cogni.domain.user import (
    MAX_LEVEL,
    PRIVILEGED_DEFAULT_LEVEL,
    ScoreRecord,
    User,
    UserRole,
    generate_id,
    utcnow,
)
from cogni.domain.content import Content, ContentKind, ScenarioChoice, ScenarioStep
from cogni.domain.exam import (
    PLACEMENT_CONTENT_ID,
    PLACEMENT_EXAM_ID,
    Answer,
    Exam,
    OptionAnswer,
    Question,
    QuestionKind,
    TextAnswer,
    coerce_answer,
    coerce_answers,
)
from cogni.domain.attempt import Alert, AlertSeverity, Attempt
from cogni.domain.errors import (
    AuthFailure,
    CogniError,
    DuplicateEmailError,
    ExternalServiceError,
    GradeConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)

__all__ = [
    # User
    "MAX_LEVEL",
    "PRIVILEGED_DEFAULT_LEVEL",
    "ScoreRecord",
    "User",
    "UserRole",
    "generate_id",
    "utcnow",
    # Content
    "Content",
    "ContentKind",
    "ScenarioChoice",
    "ScenarioStep",
    # Exams
    "PLACEMENT_CONTENT_ID",
    "PLACEMENT_EXAM_ID",
    "Answer",
    "Exam",
    "OptionAnswer",
    "Question",
    "QuestionKind",
    "TextAnswer",
    "coerce_answer",
    "coerce_answers",
    # Attempts & alerts
    "Alert",
    "AlertSeverity",
    "Attempt",
    # Errors
    "AuthFailure",
    "CogniError",
    "DuplicateEmailError",
    "ExternalServiceError",
    "GradeConflictError",
    "InvalidInputError",
    "NotFoundError",
    "PermissionDeniedError",
]
