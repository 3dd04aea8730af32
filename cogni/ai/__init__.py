"""
Advisory AI zone.

All advisory calls are:
- Best-effort, with static Persian fallbacks
- Suggestions only; never applied without a human confirmation
"""

from cogni.ai.advisor import AdvisoryService, GradeSuggestion

__all__ = [
    "AdvisoryService",
    "GradeSuggestion",
]
