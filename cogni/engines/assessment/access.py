"""
Access Control Policy - level gate with the placement-first override.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel

from cogni.domain.content import Content, ContentKind
from cogni.domain.exam import Exam
from cogni.domain.user import User


class Library(BaseModel):
    """A user's view of the content catalogue."""

    recommended: List[Content] = []
    available: List[Content] = []
    locked: List[Content] = []


class AccessPolicy:
    """
    Decides what a user may open.

    Precedence:
    1. Teacher / Admin - full access
    2. Citizen at level 0 - placement exam only
    3. Otherwise - user.level >= content.min_level (max_level never blocks)
    """

    MAX_RECOMMENDED = 2

    @staticmethod
    def can_access(user: User, content: Content) -> bool:
        """Check whether the user may view a content item."""
        if user.is_privileged:
            return True
        if user.needs_placement:
            return False
        return user.level >= content.min_level

    @classmethod
    def can_take_exam(cls, user: User, exam: Exam, content: Optional[Content]) -> bool:
        """
        Check whether the user may start an exam.

        A regular exam inherits the gate of its content. An exam whose content
        is missing is only open to privileged roles.
        """
        if exam.is_placement or user.is_privileged:
            return True
        if content is None:
            return False
        return cls.can_access(user, content)

    @classmethod
    def library(
        cls,
        user: User,
        contents: Iterable[Content],
        kind: Optional[ContentKind] = None,
    ) -> Library:
        """Split the catalogue into recommended, available and locked items."""
        visible = [
            c for c in contents
            if (c.is_active or user.is_privileged) and (kind is None or c.kind == kind)
        ]
        open_items = [c for c in visible if cls.can_access(user, c)]
        recommended = [c for c in open_items if c.min_level == user.level][: cls.MAX_RECOMMENDED]
        recommended_ids = {c.id for c in recommended}
        return Library(
            recommended=recommended,
            available=[c for c in open_items if c.id not in recommended_ids],
            locked=[c for c in visible if not cls.can_access(user, c)],
        )
