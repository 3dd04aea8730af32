"""
Admin and dashboard schemas.
"""

from pydantic import BaseModel, Field

from cogni.domain.attempt import AlertSeverity


class AlertCreate(BaseModel):
    """System alert broadcast request."""

    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    severity: AlertSeverity = AlertSeverity.LOW


class InsightResponse(BaseModel):
    """Advisory summary of a user's score history."""

    text: str
