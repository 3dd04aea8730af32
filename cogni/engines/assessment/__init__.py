"""
Assessment engine - scoring, progression, access gate and exam sessions.

Scoring:
- MCQ-only exams scored as round(correct / total * 100)
- Descriptive questions defer to manual grading
- Placement exam weighted into 10..90 (75 without MCQs)

Progression:
- Placement sets the starting level
- Regular exams add XP, level follows a fixed curve and never drops
"""

from cogni.engines.assessment.scoring import ScoringEngine, ScoreOutcome, QuestionResult
from cogni.engines.assessment.progression import ProgressionEngine, LevelChange
from cogni.engines.assessment.access import AccessPolicy, Library
from cogni.engines.assessment.exam_session import ExamSession, SessionState

__all__ = [
    "ScoringEngine",
    "ScoreOutcome",
    "QuestionResult",
    "ProgressionEngine",
    "LevelChange",
    "AccessPolicy",
    "Library",
    "ExamSession",
    "SessionState",
]
