"""
Content library and authoring endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, status

from cogni.api.deps import CurrentUser, Platform, PrivilegedUser
from cogni.domain.content import Content, ContentKind
from cogni.domain.exam import Exam
from cogni.engines.assessment.access import Library
from cogni.schemas.content import ContentActiveUpdate, ContentCreate, ExamCreate, ExamView

router = APIRouter()


@router.get("/library", response_model=Library)
async def get_library(
    user: CurrentUser,
    platform: Platform,
    kind: Optional[ContentKind] = None,
):
    """Recommended, available and locked content for the current user."""
    return platform.library(user.id, kind)


@router.post("", response_model=Content, status_code=status.HTTP_201_CREATED)
async def create_content(data: ContentCreate, user: PrivilegedUser, platform: Platform):
    """Publish a content item. Scenario graphs are validated before storing."""
    return await platform.create_content(user.id, data.to_content(user.id))


@router.get("/{content_id}", response_model=Content)
async def get_content(content_id: str, user: CurrentUser, platform: Platform):
    """Open a content item; 403 while it is locked for the user."""
    return platform.view_content(user.id, content_id)


@router.patch("/{content_id}/active", response_model=Content)
async def set_content_active(
    content_id: str,
    data: ContentActiveUpdate,
    user: PrivilegedUser,
    platform: Platform,
):
    return await platform.set_content_active(user.id, content_id, data.is_active)


@router.get("/{content_id}/exams", response_model=List[ExamView])
async def list_content_exams(content_id: str, user: CurrentUser, platform: Platform):
    platform.view_content(user.id, content_id)
    return [ExamView.from_exam(e) for e in platform.list_exams(content_id) if e.is_active]


@router.post("/{content_id}/exams", response_model=Exam, status_code=status.HTTP_201_CREATED)
async def create_exam(
    content_id: str,
    data: ExamCreate,
    user: PrivilegedUser,
    platform: Platform,
):
    """Attach an exam to a content item."""
    return await platform.create_exam(user.id, data.to_exam(content_id))
