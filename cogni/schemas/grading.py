"""
Grading schemas.
"""

from pydantic import BaseModel


class GradeRequest(BaseModel):
    """Manual grade. Range is checked by the grading workflow."""

    score: int
