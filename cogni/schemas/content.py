"""
Content and exam authoring schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from cogni.domain.content import Content, ContentKind, ScenarioStep
from cogni.domain.errors import InvalidInputError
from cogni.domain.exam import Exam, Question, QuestionKind
from cogni.domain.user import MAX_LEVEL


class ContentCreate(BaseModel):
    """Content publishing request."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    kind: ContentKind = ContentKind.TEXT
    min_level: int = Field(1, ge=0, le=MAX_LEVEL)
    max_level: int = Field(MAX_LEVEL, ge=0, le=MAX_LEVEL)
    duration_minutes: int = Field(15, ge=0)
    is_active: bool = True
    body: Optional[str] = None
    video_url: Optional[str] = None
    scenario_steps: Optional[List[ScenarioStep]] = None
    entry_step_id: Optional[str] = None

    def to_content(self, author_id: str) -> Content:
        """Build the domain object; shape errors become InvalidInputError."""
        try:
            return Content(author_id=author_id, **self.model_dump())
        except ValidationError as exc:
            raise InvalidInputError(str(exc)) from exc


class ContentActiveUpdate(BaseModel):
    is_active: bool


class ExamCreate(BaseModel):
    """Exam creation request. The content id comes from the path."""

    title: str = Field(..., min_length=1, max_length=255)
    time_limit: int = Field(15, gt=0)
    questions: List[Question] = Field(..., min_length=1)

    def to_exam(self, content_id: str) -> Exam:
        try:
            return Exam(content_id=content_id, **self.model_dump())
        except ValidationError as exc:
            raise InvalidInputError(str(exc)) from exc


class QuestionView(BaseModel):
    """A question as shown to a learner, without the answer key."""

    id: str
    text: str
    kind: QuestionKind
    options: Optional[List[str]] = None


class ExamView(BaseModel):
    """An exam as shown to a learner."""

    id: str
    content_id: str
    title: str
    time_limit: int
    questions: List[QuestionView]

    @classmethod
    def from_exam(cls, exam: Exam) -> "ExamView":
        return cls(
            id=exam.id,
            content_id=exam.content_id,
            title=exam.title,
            time_limit=exam.time_limit,
            questions=[
                QuestionView(id=q.id, text=q.text, kind=q.kind, options=q.options)
                for q in exam.questions
            ],
        )
