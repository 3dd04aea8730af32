"""
API v1 routes.
"""

from fastapi import APIRouter

from cogni.api.v1 import admin, auth, content, dashboard, exams, grading, scenarios

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(content.router, prefix="/contents", tags=["Content"])
router.include_router(exams.router, prefix="/exams", tags=["Exams"])
router.include_router(scenarios.router, prefix="/scenarios", tags=["Scenarios"])
router.include_router(grading.router, prefix="/grading", tags=["Grading"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
