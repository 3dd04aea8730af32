"""
Manual grading endpoints for teachers and admins.
"""

from typing import List

from fastapi import APIRouter

from cogni.ai.advisor import GradeSuggestion
from cogni.api.deps import Platform, PrivilegedUser
from cogni.domain.attempt import Attempt
from cogni.engines.grading.workflow import GradingResult
from cogni.schemas.grading import GradeRequest

router = APIRouter()


@router.get("/pending", response_model=List[Attempt])
async def list_pending(user: PrivilegedUser, platform: Platform):
    """Ungraded attempts, oldest first."""
    return platform.pending_attempts()


@router.post("/attempts/{attempt_id}/suggestion", response_model=GradeSuggestion)
async def suggest_grade(attempt_id: str, user: PrivilegedUser, platform: Platform):
    """Advisory score proposal. Nothing is applied."""
    return await platform.suggest_grade(user.id, attempt_id)


@router.post("/attempts/{attempt_id}/grade", response_model=GradingResult)
async def grade_attempt(
    attempt_id: str,
    data: GradeRequest,
    user: PrivilegedUser,
    platform: Platform,
):
    """Finalize the score and apply progression once."""
    return await platform.grade_attempt(user.id, attempt_id, data.score)
