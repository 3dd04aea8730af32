"""
Learner dashboard endpoints.
"""

from typing import List

from fastapi import APIRouter

from cogni.api.deps import CurrentUser, Platform
from cogni.domain.attempt import Attempt
from cogni.schemas.admin import InsightResponse

router = APIRouter()


@router.get("/attempts", response_model=List[Attempt])
async def my_attempts(user: CurrentUser, platform: Platform):
    return platform.list_attempts(user.id)


@router.get("/insight", response_model=InsightResponse)
async def cognitive_insight(user: CurrentUser, platform: Platform):
    """Short advisory analysis of the user's score history."""
    return InsightResponse(text=await platform.cognitive_insight(user.id))
