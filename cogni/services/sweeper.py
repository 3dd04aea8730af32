"""
Background sweep over in-memory exam and scenario sessions.

Runs for the lifetime of the application: overdue timed exams are
force-submitted, and stale sessions are dropped.
"""

import asyncio

from cogni.logging_config import get_logger
from cogni.services.platform import LearningPlatform

logger = get_logger(__name__)


async def sweep_sessions(platform: LearningPlatform) -> None:
    """One pass: expire overdue exam sessions, then prune old ones."""
    expired = await platform.expire_overdue_sessions()
    pruned = await platform.prune_sessions()
    if expired:
        logger.info("Overdue exam sessions expired", extra={"count": len(expired), "pruned": pruned})


async def run_session_sweeper(platform: LearningPlatform, interval_seconds: float) -> None:
    """Sweep every interval_seconds until cancelled."""
    while True:
        try:
            await sweep_sessions(platform)
        except Exception as exc:
            logger.error("Session sweep failed: %s", exc)
        await asyncio.sleep(interval_seconds)
