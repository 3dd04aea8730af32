"""
Scenario walk endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from cogni.api.deps import CurrentUser, Platform
from cogni.engines.scenario.session import ScenarioSession
from cogni.engines.scenario.state_machine import ScenarioTransition
from cogni.schemas.exam import ScenarioChoiceRequest

router = APIRouter()


@router.post(
    "/{content_id}/sessions",
    response_model=ScenarioSession,
    status_code=status.HTTP_201_CREATED,
)
async def start_scenario(content_id: str, user: CurrentUser, platform: Platform):
    return await platform.start_scenario(user.id, content_id)


@router.get("/sessions/{session_id}", response_model=ScenarioSession)
async def get_scenario_session(session_id: str, user: CurrentUser, platform: Platform):
    session = platform.get_scenario_session(session_id)
    if session.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your session")
    return session


@router.post("/sessions/{session_id}/choices", response_model=ScenarioTransition)
async def choose_option(
    session_id: str,
    data: ScenarioChoiceRequest,
    user: CurrentUser,
    platform: Platform,
):
    """Pick an option at the current step; returns its feedback and the next step."""
    if platform.get_scenario_session(session_id).user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your session")
    return await platform.choose_scenario_option(session_id, data.choice_index)
