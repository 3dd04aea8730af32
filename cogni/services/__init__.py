"""
Application services - the state owner and its built-in records.
"""

from cogni.services.platform import LearningPlatform, PlatformAnalytics, SubmissionResult

__all__ = [
    "LearningPlatform",
    "PlatformAnalytics",
    "SubmissionResult",
]
