"""
Exams, questions and submitted answers.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, model_validator

from cogni.domain.user import generate_id

PLACEMENT_EXAM_ID = "placement"
PLACEMENT_CONTENT_ID = "none"  # content reference of the placement exam


class QuestionKind(str, Enum):
    """Question kinds."""
    MCQ = "MCQ"
    DESCRIPTIVE = "DESCRIPTIVE"


class Question(BaseModel):
    """An exam question. Only MCQ carries options and a correct index."""

    id: str = Field(default_factory=generate_id)
    text: str
    kind: QuestionKind = QuestionKind.MCQ
    options: Optional[List[str]] = None
    correct_option: Optional[int] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "Question":
        if self.kind == QuestionKind.MCQ:
            if not self.options:
                raise ValueError("multiple-choice question needs options")
            if self.correct_option is None:
                raise ValueError("multiple-choice question needs correct_option")
            if not 0 <= self.correct_option < len(self.options):
                raise ValueError("correct_option is outside the option list")
        elif self.options is not None or self.correct_option is not None:
            raise ValueError("descriptive question cannot carry options")
        return self


class Exam(BaseModel):
    """An ordered question list tied to a content item (or the placement sentinel)."""

    id: str = Field(default_factory=generate_id)
    content_id: str
    title: str
    questions: List[Question] = Field(..., min_length=1)
    time_limit: int = Field(15, gt=0)  # minutes
    is_active: bool = True

    @property
    def is_placement(self) -> bool:
        return self.id == PLACEMENT_EXAM_ID

    @property
    def question_by_id(self) -> Dict[str, Question]:
        return {q.id: q for q in self.questions}


class OptionAnswer(BaseModel):
    """Selected option index for a multiple-choice question."""

    kind: Literal["option"] = "option"
    selected_option: int


class TextAnswer(BaseModel):
    """Free text for a descriptive question."""

    kind: Literal["text"] = "text"
    text: str


Answer = Annotated[Union[OptionAnswer, TextAnswer], Field(discriminator="kind")]


def coerce_answer(raw: Any) -> Union[OptionAnswer, TextAnswer]:
    """Build a tagged answer from an int, a str, or an already tagged dict."""
    if isinstance(raw, (OptionAnswer, TextAnswer)):
        return raw
    if isinstance(raw, bool):
        raise TypeError("boolean is not a valid answer")
    if isinstance(raw, int):
        return OptionAnswer(selected_option=raw)
    if isinstance(raw, str):
        return TextAnswer(text=raw)
    if isinstance(raw, Mapping):
        if raw.get("kind") == "text":
            return TextAnswer.model_validate(raw)
        return OptionAnswer.model_validate(raw)
    raise TypeError(f"unsupported answer payload: {type(raw).__name__}")


def coerce_answers(raw: Mapping[str, Any]) -> Dict[str, Union[OptionAnswer, TextAnswer]]:
    return {question_id: coerce_answer(value) for question_id, value in raw.items()}
