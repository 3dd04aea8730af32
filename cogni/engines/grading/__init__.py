"""Grading workflow for attempts that need a human score."""

from cogni.engines.grading.workflow import GradingResult, GradingWorkflow

__all__ = [
    "GradingResult",
    "GradingWorkflow",
]
