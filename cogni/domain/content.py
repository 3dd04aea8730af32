"""
Leveled learning content: static text, video, or a branching scenario.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from cogni.domain.user import MAX_LEVEL, generate_id


class ContentKind(str, Enum):
    """Content payload kinds (mutually exclusive)."""
    TEXT = "TEXT"
    VIDEO = "VIDEO"
    SCENARIO = "SCENARIO"


class ScenarioChoice(BaseModel):
    """One option of a scenario step. No next_step_id marks a terminal branch."""

    text: str
    impact: int = 0  # signed cognitive impact
    feedback: str = ""
    next_step_id: Optional[str] = None


class ScenarioStep(BaseModel):
    """A node of the scenario graph, addressed by string id."""

    id: str
    text: str
    options: List[ScenarioChoice] = []

    @property
    def is_terminal(self) -> bool:
        return all(choice.next_step_id is None for choice in self.options)


class Content(BaseModel):
    """A learning item visible to users whose level reaches min_level."""

    id: str = Field(default_factory=generate_id)
    title: str
    description: str = ""
    kind: ContentKind = ContentKind.TEXT
    min_level: int = Field(1, ge=0, le=MAX_LEVEL)
    max_level: int = Field(MAX_LEVEL, ge=0, le=MAX_LEVEL)
    duration_minutes: int = Field(15, ge=0)
    author_id: str
    is_active: bool = True

    # Payloads, exactly one present depending on kind
    body: Optional[str] = None
    video_url: Optional[str] = None
    scenario_steps: Optional[List[ScenarioStep]] = None
    entry_step_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "Content":
        if self.min_level > self.max_level:
            raise ValueError("min_level must not exceed max_level")

        payloads = {
            ContentKind.TEXT: self.body,
            ContentKind.VIDEO: self.video_url,
            ContentKind.SCENARIO: self.scenario_steps,
        }
        if payloads[self.kind] is None:
            raise ValueError(f"{self.kind.value} content requires its payload")
        for kind, payload in payloads.items():
            if kind != self.kind and payload is not None:
                raise ValueError(f"{self.kind.value} content cannot carry a {kind.value} payload")

        if self.kind == ContentKind.SCENARIO:
            steps = self.scenario_steps or []
            if not steps:
                raise ValueError("scenario content needs at least one step")
            ids = [s.id for s in steps]
            if len(set(ids)) != len(ids):
                raise ValueError("scenario step ids must be unique")
            if self.entry_step_id is None:
                self.entry_step_id = steps[0].id
            elif self.entry_step_id not in ids:
                raise ValueError(f"entry step {self.entry_step_id!r} is not a step of this scenario")
        elif self.entry_step_id is not None:
            raise ValueError("only scenario content has an entry step")
        return self

    def get_step(self, step_id: str) -> Optional[ScenarioStep]:
        for step in self.scenario_steps or []:
            if step.id == step_id:
                return step
        return None
