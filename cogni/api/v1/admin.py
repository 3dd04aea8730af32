"""
Admin endpoints: alerts and analytics.
"""

from typing import List

from fastapi import APIRouter, status

from cogni.api.deps import AdminUser, CurrentUser, Platform, PrivilegedUser
from cogni.domain.attempt import Alert
from cogni.schemas.admin import AlertCreate
from cogni.services.platform import PlatformAnalytics

router = APIRouter()


@router.get("/alerts", response_model=List[Alert])
async def list_alerts(user: CurrentUser, platform: Platform):
    """Alerts, newest first. Visible to every signed-in user."""
    return platform.list_alerts()


@router.post("/alerts", response_model=Alert, status_code=status.HTTP_201_CREATED)
async def broadcast_alert(data: AlertCreate, user: AdminUser, platform: Platform):
    return await platform.broadcast_alert(user.id, data.title, data.message, data.severity)


@router.get("/analytics", response_model=PlatformAnalytics)
async def get_analytics(user: PrivilegedUser, platform: Platform):
    return platform.analytics(user.id)
