"""
Exam endpoints: placement, timed sessions and one-shot submissions.
"""

from fastapi import APIRouter, HTTPException, status

from cogni.api.deps import CurrentUser, Platform
from cogni.domain.exam import PLACEMENT_EXAM_ID
from cogni.domain.user import User
from cogni.engines.assessment.exam_session import ExamSession
from cogni.schemas.content import ExamView
from cogni.schemas.exam import (
    AnswerRequest,
    ExamSessionResponse,
    StartExamRequest,
    SubmitAttemptRequest,
)
from cogni.services.platform import LearningPlatform, SubmissionResult

router = APIRouter()


def _own_session(platform: LearningPlatform, session_id: str, user: User) -> ExamSession:
    session = platform.get_exam_session(session_id)
    if session.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Exam session belongs to another user",
        )
    return session


@router.get("/placement", response_model=ExamView)
async def get_placement_exam(user: CurrentUser, platform: Platform):
    return ExamView.from_exam(platform.get_exam(PLACEMENT_EXAM_ID))


@router.post("/placement/submit", response_model=SubmissionResult)
async def submit_placement(data: SubmitAttemptRequest, user: CurrentUser, platform: Platform):
    """Score the placement exam and assign the starting level."""
    return await platform.submit_attempt(
        user.id, PLACEMENT_EXAM_ID, data.answers, retake=data.retake
    )


@router.get("/{exam_id}", response_model=ExamView)
async def get_exam(exam_id: str, user: CurrentUser, platform: Platform):
    if not platform.can_take_exam(user.id, exam_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Exam is locked")
    return ExamView.from_exam(platform.get_exam(exam_id))


@router.post("/{exam_id}/attempts", response_model=SubmissionResult)
async def submit_attempt(
    exam_id: str,
    data: SubmitAttemptRequest,
    user: CurrentUser,
    platform: Platform,
):
    return await platform.submit_attempt(user.id, exam_id, data.answers, retake=data.retake)


@router.post(
    "/{exam_id}/sessions",
    response_model=ExamSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_exam_session(
    exam_id: str,
    data: StartExamRequest,
    user: CurrentUser,
    platform: Platform,
):
    """Start the countdown for an exam."""
    session = await platform.start_exam(user.id, exam_id, retake=data.retake)
    return ExamSessionResponse.from_session(session)


@router.get("/sessions/{session_id}", response_model=ExamSessionResponse)
async def get_exam_session(session_id: str, user: CurrentUser, platform: Platform):
    return ExamSessionResponse.from_session(_own_session(platform, session_id, user))


@router.put("/sessions/{session_id}/answers", response_model=ExamSessionResponse)
async def record_answer(
    session_id: str,
    data: AnswerRequest,
    user: CurrentUser,
    platform: Platform,
):
    _own_session(platform, session_id, user)
    session = await platform.answer_question(session_id, data.question_id, data.answer)
    return ExamSessionResponse.from_session(session)


@router.post("/sessions/{session_id}/submit", response_model=SubmissionResult)
async def submit_exam_session(session_id: str, user: CurrentUser, platform: Platform):
    """Finalize the session. Submitting twice returns the same attempt."""
    _own_session(platform, session_id, user)
    return await platform.submit_exam(session_id)


@router.post("/sessions/{session_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_exam_session(session_id: str, user: CurrentUser, platform: Platform):
    """Abandon the session; nothing is recorded."""
    _own_session(platform, session_id, user)
    await platform.cancel_exam(session_id)
