"""
Progression Engine - converts finalized scores into level and experience.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from cogni.domain.errors import InvalidInputError
from cogni.domain.exam import Exam
from cogni.domain.user import MAX_LEVEL, ScoreRecord, User, utcnow
from cogni.logging_config import get_logger

logger = get_logger(__name__)


class LevelChange(BaseModel):
    """What one advancement did to a user."""

    user_id: str
    exam_id: str
    score: int
    xp_gained: int
    level_before: int
    level_after: int

    @property
    def leveled_up(self) -> bool:
        return self.level_after > self.level_before


class ProgressionEngine:
    """
    Level and XP rules, version RULESET_VERSION.

    Placement: level = clamp(floor(score / 10), 1, MAX_LEVEL)
    Regular:   xp += score * XP_MULTIPLIER
               level = max(level, min(floor(xp / XP_PER_LEVEL) + 1, MAX_LEVEL))

    Neither path lowers level or xp. Only placement moves a citizen off level 0.
    """

    RULESET_VERSION = 1
    MAX_LEVEL = MAX_LEVEL
    XP_MULTIPLIER = 1
    XP_PER_LEVEL = 250

    @classmethod
    def placement_level(cls, score: int) -> int:
        """Staircase mapping from placement score to starting level."""
        return max(1, min(score // 10, cls.MAX_LEVEL))

    @classmethod
    def level_for_xp(cls, xp: int) -> int:
        """Fixed-width leveling curve."""
        return min(xp // cls.XP_PER_LEVEL + 1, cls.MAX_LEVEL)

    @classmethod
    def advance(
        cls,
        user: User,
        exam: Exam,
        score: Optional[int],
        *,
        now: Optional[datetime] = None,
        retake: bool = False,
    ) -> User:
        """
        Apply a finalized score to a user.

        Args:
            user: Current user snapshot (not mutated)
            exam: Exam the score belongs to
            score: Finalized score, or None while manual grading is pending
            now: Timestamp for the score record
            retake: Allow the placement exam for an already placed user

        Returns:
            Updated copy of the user (the same object when score is None)

        Raises:
            InvalidInputError: Score outside [0, 100], or placement without retake
        """
        if score is None:
            logger.debug(
                "Progression deferred until grading",
                extra={"user_id": user.id, "exam_id": exam.id},
            )
            return user
        if not 0 <= score <= 100:
            raise InvalidInputError(f"score must be within [0, 100], got {score}")

        xp_gained = score * cls.XP_MULTIPLIER
        xp = user.xp + xp_gained

        if exam.is_placement:
            if user.level > 0 and not retake:
                raise InvalidInputError("placement already completed; pass retake=True to retake it")
            level = max(user.level, cls.placement_level(score))
        elif user.level == 0:
            level = 0
        else:
            level = max(user.level, cls.level_for_xp(xp))

        record = ScoreRecord(
            content_id=exam.content_id,
            exam_id=exam.id,
            score=score,
            date=now or utcnow(),
        )
        updated = user.model_copy(
            update={
                "xp": xp,
                "level": level,
                "score_history": [*user.score_history, record],
            }
        )

        if level > user.level:
            logger.info(
                "User level raised",
                extra={"user_id": user.id, "level_before": user.level, "level_after": level},
            )
        return updated

    @classmethod
    def describe(cls, before: User, after: User, exam: Exam) -> Optional[LevelChange]:
        """Summarize an advancement; None when nothing was applied."""
        if len(after.score_history) == len(before.score_history):
            return None
        last = after.score_history[-1]
        return LevelChange(
            user_id=after.id,
            exam_id=exam.id,
            score=last.score,
            xp_gained=after.xp - before.xp,
            level_before=before.level,
            level_after=after.level,
        )
