"""
Grading Workflow - manual (optionally assisted) grading of pending attempts.

Pending -> Graded, one shot. Re-grading with the same score is a no-op;
a different score is refused with GradeConflictError.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel

from cogni.ai.advisor import AdvisoryService, GradeSuggestion
from cogni.domain.attempt import Attempt
from cogni.domain.errors import GradeConflictError, InvalidInputError, PermissionDeniedError
from cogni.domain.exam import Exam, QuestionKind, TextAnswer
from cogni.domain.user import User
from cogni.engines.assessment.progression import ProgressionEngine
from cogni.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_QUESTION_CONTEXT = "ارزیابی پاسخ شناختی"


class GradingResult(BaseModel):
    """Graded attempt plus the learner after progression."""

    attempt: Attempt
    user: User
    applied: bool  # False when the call was an idempotent repeat


class GradingWorkflow:
    """Grades attempts the scoring engine could not score."""

    @staticmethod
    def pending(attempts: Iterable[Attempt]) -> List[Attempt]:
        """Attempts still waiting for a grader, oldest first."""
        return sorted((a for a in attempts if not a.is_graded), key=lambda a: a.date)

    @staticmethod
    def grade(
        attempt: Attempt,
        user: User,
        exam: Exam,
        score: int,
        grader: User,
    ) -> GradingResult:
        """
        Finalize an attempt's score and apply progression once.

        Raises:
            PermissionDeniedError: Grader is not a teacher or admin
            InvalidInputError: Score outside [0, 100] or attempt/user mismatch
            GradeConflictError: Attempt already graded with a different score
        """
        if not grader.is_privileged:
            raise PermissionDeniedError("only teachers and admins may grade attempts")
        if not 0 <= score <= 100:
            raise InvalidInputError(f"score must be within [0, 100], got {score}")
        if attempt.user_id != user.id or attempt.exam_id != exam.id:
            raise InvalidInputError(f"attempt {attempt.id} does not belong to this user and exam")

        if attempt.is_graded:
            if attempt.score == score:
                return GradingResult(attempt=attempt, user=user, applied=False)
            logger.warning(
                "Regrade refused",
                extra={
                    "attempt_id": attempt.id,
                    "current_score": attempt.score,
                    "requested_score": score,
                    "grader_id": grader.id,
                },
            )
            raise GradeConflictError(
                f"attempt {attempt.id} was already graded with {attempt.score}"
            )

        graded = attempt.model_copy(update={"score": score, "is_graded": True, "graded_by": grader.id})
        advanced = ProgressionEngine.advance(user, exam, score)
        logger.info(
            "Attempt graded",
            extra={"attempt_id": attempt.id, "score": score, "grader_id": grader.id},
        )
        return GradingResult(attempt=graded, user=advanced, applied=True)

    @staticmethod
    def describe_answers(attempt: Attempt, exam: Exam) -> tuple[str, str]:
        """Question context and answer text for the descriptive part of an attempt."""
        questions: List[str] = []
        answers: List[str] = []
        for question in exam.questions:
            if question.kind != QuestionKind.DESCRIPTIVE:
                continue
            answer = attempt.answers.get(question.id)
            questions.append(question.text)
            answers.append(answer.text if isinstance(answer, TextAnswer) else "")
        context = "\n".join(questions) or DEFAULT_QUESTION_CONTEXT
        return context, "\n---\n".join(answers)

    @classmethod
    async def suggest(
        cls,
        attempt: Attempt,
        exam: Exam,
        advisor: Optional[AdvisoryService] = None,
    ) -> GradeSuggestion:
        """Ask the advisory service for a proposed score. Nothing is applied."""
        context, answer_text = cls.describe_answers(attempt, exam)
        advisor = advisor or AdvisoryService()
        return await advisor.suggest_grade(context, answer_text)
