"""Branching interactive scenarios - transition logic and per-user sessions."""

from cogni.engines.scenario.state_machine import (
    ScenarioOutcome,
    ScenarioStateMachine,
    ScenarioTransition,
)
from cogni.engines.scenario.session import ScenarioSession

__all__ = [
    "ScenarioOutcome",
    "ScenarioStateMachine",
    "ScenarioTransition",
    "ScenarioSession",
]
