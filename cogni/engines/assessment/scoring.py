"""
Scoring Engine - turns submitted answers into a score or a manual-grading marker.
"""

import math
from typing import List, Mapping, Optional

from pydantic import BaseModel

from cogni.domain.errors import InvalidInputError
from cogni.domain.exam import Answer, Exam, OptionAnswer, Question, QuestionKind, TextAnswer


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


class QuestionResult(BaseModel):
    """Result for a single question. `correct` is None for descriptive answers."""

    question_id: str
    kind: QuestionKind
    answered: bool
    correct: Optional[bool] = None


class ScoreOutcome(BaseModel):
    """Either a score in [0, 100] or the 'requires manual grading' marker."""

    score: Optional[int] = None
    requires_manual_grading: bool = False
    total_questions: int
    mcq_count: int
    correct_count: int
    question_results: List[QuestionResult] = []

    @property
    def is_graded(self) -> bool:
        return self.score is not None


class ScoringEngine:
    """
    Scores exam attempts.

    - MCQ-only exam: round(correct / total * 100), 100 when there is nothing to score
    - Any descriptive question: manual grading required
    - Placement exam: MCQ subset weighted into 10..90, neutral 75 without MCQs
    """

    PLACEMENT_BASE = 10
    PLACEMENT_SPAN = 80
    PLACEMENT_NEUTRAL_SCORE = 75
    VACUOUS_SCORE = 100

    @classmethod
    def score(cls, exam: Exam, answers: Mapping[str, Answer]) -> ScoreOutcome:
        """
        Score an attempt.

        Args:
            exam: Exam definition
            answers: Question id -> tagged answer

        Returns:
            ScoreOutcome

        Raises:
            InvalidInputError: Answer for an unknown question, answer shape not
                matching the question kind, or option index out of bounds
        """
        cls.validate_answers(exam, answers)

        results = [cls.grade_question(q, answers.get(q.id)) for q in exam.questions]
        mcq_results = [r for r in results if r.kind == QuestionKind.MCQ]
        correct = sum(1 for r in mcq_results if r.correct)
        has_descriptive = len(mcq_results) < len(results)

        if exam.is_placement:
            if mcq_results:
                score = round_half_up(
                    correct / len(mcq_results) * cls.PLACEMENT_SPAN + cls.PLACEMENT_BASE
                )
            else:
                score = cls.PLACEMENT_NEUTRAL_SCORE
        elif has_descriptive:
            score = None
        elif not mcq_results:
            score = cls.VACUOUS_SCORE
        else:
            score = round_half_up(correct / len(mcq_results) * 100)

        return ScoreOutcome(
            score=score,
            requires_manual_grading=score is None,
            total_questions=len(results),
            mcq_count=len(mcq_results),
            correct_count=correct,
            question_results=results,
        )

    @staticmethod
    def grade_question(question: Question, answer: Optional[Answer]) -> QuestionResult:
        """Grade one question. Unanswered MCQs count as wrong."""
        if question.kind == QuestionKind.MCQ:
            correct = isinstance(answer, OptionAnswer) and answer.selected_option == question.correct_option
            return QuestionResult(
                question_id=question.id,
                kind=question.kind,
                answered=answer is not None,
                correct=correct,
            )
        answered = isinstance(answer, TextAnswer) and bool(answer.text.strip())
        return QuestionResult(question_id=question.id, kind=question.kind, answered=answered)

    @staticmethod
    def validate_answers(exam: Exam, answers: Mapping[str, Answer]) -> None:
        """Reject answers that do not fit the exam's questions."""
        questions = exam.question_by_id
        for question_id, answer in answers.items():
            question = questions.get(question_id)
            if question is None:
                raise InvalidInputError(f"answer for unknown question {question_id!r}")
            if question.kind == QuestionKind.MCQ:
                if not isinstance(answer, OptionAnswer):
                    raise InvalidInputError(f"question {question_id!r} expects an option index")
                if not 0 <= answer.selected_option < len(question.options or []):
                    raise InvalidInputError(
                        f"option {answer.selected_option} is out of range for question {question_id!r}"
                    )
            elif not isinstance(answer, TextAnswer):
                raise InvalidInputError(f"question {question_id!r} expects free text")
