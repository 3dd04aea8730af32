"""
Builders for domain objects used across the test suite.
"""

from typing import List, Optional

from cogni.domain.content import Content, ContentKind, ScenarioChoice, ScenarioStep
from cogni.domain.exam import Exam, Question, QuestionKind
from cogni.domain.user import User, UserRole


def make_user(
    role: UserRole = UserRole.CITIZEN,
    level: int = 0,
    xp: int = 0,
    name: str = "Test User",
    email: Optional[str] = None,
) -> User:
    return User(name=name, email=email or "user@example.com", role=role, level=level, xp=xp)


def mcq(question_id: str, correct: int = 0, options: int = 4) -> Question:
    return Question(
        id=question_id,
        text=f"Question {question_id}",
        kind=QuestionKind.MCQ,
        options=[f"option {i}" for i in range(options)],
        correct_option=correct,
    )


def descriptive(question_id: str) -> Question:
    return Question(id=question_id, text=f"Explain {question_id}", kind=QuestionKind.DESCRIPTIVE)


def make_exam(questions: List[Question], exam_id: str = "exam-1", content_id: str = "content-1") -> Exam:
    return Exam(id=exam_id, content_id=content_id, title="Test exam", questions=questions, time_limit=10)


def make_content(content_id: str = "content-1", min_level: int = 1, **kwargs) -> Content:
    kwargs.setdefault("body", "Reading material")
    return Content(
        id=content_id,
        title=f"Content {content_id}",
        kind=ContentKind.TEXT,
        min_level=min_level,
        author_id="teacher-1",
        **kwargs,
    )


def make_scenario(content_id: str = "scenario-1", min_level: int = 1) -> Content:
    """Two-step scenario: s1 -> s2 on choice 0, terminal on choice 1; s2 ends on both choices."""
    return Content(
        id=content_id,
        title="Workplace decision",
        kind=ContentKind.SCENARIO,
        min_level=min_level,
        author_id="teacher-1",
        scenario_steps=[
            ScenarioStep(
                id="s1",
                text="A colleague asks for help during a deadline.",
                options=[
                    ScenarioChoice(text="Help briefly", impact=5, feedback="Balanced", next_step_id="s2"),
                    ScenarioChoice(text="Ignore", impact=-5, feedback="Isolating"),
                ],
            ),
            ScenarioStep(
                id="s2",
                text="The deadline is close.",
                options=[
                    ScenarioChoice(text="Prioritize", impact=10, feedback="Focused"),
                    ScenarioChoice(text="Panic", impact=-10, feedback="Stressed"),
                ],
            ),
        ],
    )

