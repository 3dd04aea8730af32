"""
Scenario session - one user's walk through a scenario.
"""

from datetime import datetime
from typing import ClassVar, List, Optional

from pydantic import BaseModel, Field

from cogni.domain.content import Content
from cogni.domain.errors import InvalidInputError
from cogni.domain.user import generate_id, utcnow
from cogni.engines.scenario.state_machine import (
    ScenarioOutcome,
    ScenarioStateMachine,
    ScenarioTransition,
)


class ScenarioSession(BaseModel):
    """
    Tracks the current step of a scenario walk.

    Cyclic step graphs are allowed, so the walk is capped at
    MAX_TRANSITIONS choices.
    """

    MAX_TRANSITIONS: ClassVar[int] = 50

    id: str = Field(default_factory=generate_id)
    user_id: str
    content_id: str
    current_step_id: str
    path: List[str] = []
    started_at: datetime = Field(default_factory=utcnow)
    finished: bool = False
    outcome: Optional[ScenarioOutcome] = None

    @classmethod
    def start(
        cls, user_id: str, content: Content, now: Optional[datetime] = None
    ) -> "ScenarioSession":
        ScenarioStateMachine.ensure_valid(content)
        entry = ScenarioStateMachine.entry_step(content)
        return cls(
            user_id=user_id,
            content_id=content.id,
            current_step_id=entry.id,
            path=[entry.id],
            started_at=now or utcnow(),
            finished=not entry.options,
        )

    def choose(self, content: Content, choice_index: int) -> ScenarioTransition:
        """Apply a choice and advance the session."""
        if content.id != self.content_id:
            raise InvalidInputError(f"session {self.id} belongs to content {self.content_id}")
        if self.finished:
            raise InvalidInputError(f"scenario session {self.id} already finished")
        if len(self.path) - 1 >= self.MAX_TRANSITIONS:
            raise InvalidInputError(
                f"scenario session {self.id} exceeded {self.MAX_TRANSITIONS} transitions"
            )

        transition = ScenarioStateMachine.transition(content, self.current_step_id, choice_index)
        if transition.is_terminal:
            self.finished = True
            self.outcome = transition.outcome
            return transition

        self.current_step_id = transition.next_step_id
        self.path.append(transition.next_step_id)
        # A step without options is a dead end
        if not ScenarioStateMachine.get_step(content, self.current_step_id).options:
            self.finished = True
        return transition
