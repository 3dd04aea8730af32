"""
State machine for branching interactive scenarios.

States are the step ids of one SCENARIO content item; the initial state is the
content's entry step. Choosing an option either moves to its next step or, when
the option has no next step, ends the scenario with that option's feedback and
impact. Impact is not summed across steps.
"""

from collections import deque
from typing import Dict, List, Optional, Set

from pydantic import BaseModel

from cogni.domain.content import Content, ContentKind, ScenarioStep
from cogni.domain.errors import InvalidInputError
from cogni.logging_config import get_logger

logger = get_logger(__name__)


class ScenarioOutcome(BaseModel):
    """Final feedback reported when a terminal choice is taken."""

    feedback: str
    impact: int


class ScenarioTransition(BaseModel):
    """Result of one choice: either the next step or the terminal outcome."""

    from_step_id: str
    choice_index: int
    feedback: str
    impact: int
    next_step_id: Optional[str] = None
    outcome: Optional[ScenarioOutcome] = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None


def _step_map(content: Content) -> Dict[str, ScenarioStep]:
    if content.kind != ContentKind.SCENARIO or not content.scenario_steps:
        raise InvalidInputError(f"content {content.id} is not a scenario")
    return {step.id: step for step in content.scenario_steps}


class ScenarioStateMachine:
    """Pure transition logic over a scenario's step graph."""

    @staticmethod
    def entry_step(content: Content) -> ScenarioStep:
        steps = _step_map(content)
        return steps[content.entry_step_id or content.scenario_steps[0].id]

    @staticmethod
    def get_step(content: Content, step_id: str) -> ScenarioStep:
        step = _step_map(content).get(step_id)
        if step is None:
            raise InvalidInputError(f"malformed scenario: step {step_id!r} not found in content {content.id}")
        return step

    @classmethod
    def is_terminal(cls, content: Content, step_id: str) -> bool:
        return cls.get_step(content, step_id).is_terminal

    @classmethod
    def transition(cls, content: Content, current_step_id: str, choice_index: int) -> ScenarioTransition:
        """
        Take choice `choice_index` from step `current_step_id`.

        Raises:
            InvalidInputError: Unknown step, choice index out of range, or a
                choice that points at a step missing from the content
        """
        steps = _step_map(content)
        step = steps.get(current_step_id)
        if step is None:
            raise InvalidInputError(
                f"malformed scenario: step {current_step_id!r} not found in content {content.id}"
            )
        if not 0 <= choice_index < len(step.options):
            raise InvalidInputError(
                f"malformed scenario: choice {choice_index} out of range for step {current_step_id!r}"
            )

        choice = step.options[choice_index]
        if choice.next_step_id is None:
            return ScenarioTransition(
                from_step_id=step.id,
                choice_index=choice_index,
                feedback=choice.feedback,
                impact=choice.impact,
                outcome=ScenarioOutcome(feedback=choice.feedback, impact=choice.impact),
            )
        if choice.next_step_id not in steps:
            raise InvalidInputError(
                f"malformed scenario: step {step.id!r} points at missing step {choice.next_step_id!r}"
            )
        return ScenarioTransition(
            from_step_id=step.id,
            choice_index=choice_index,
            feedback=choice.feedback,
            impact=choice.impact,
            next_step_id=choice.next_step_id,
        )

    @classmethod
    def validate(cls, content: Content) -> List[str]:
        """
        Check the step graph. Returns a list of problems (empty when valid).

        - every next_step_id resolves
        - every step is reachable from the entry step
        - at least one terminal choice is reachable (cycles are allowed)
        """
        steps = _step_map(content)
        issues: List[str] = []

        for step in steps.values():
            for idx, choice in enumerate(step.options):
                if choice.next_step_id is not None and choice.next_step_id not in steps:
                    issues.append(f"step {step.id!r} choice {idx} points at missing step {choice.next_step_id!r}")

        entry = cls.entry_step(content).id
        reachable: Set[str] = {entry}
        queue = deque([entry])
        can_finish = False
        while queue:
            step = steps[queue.popleft()]
            if not step.options or any(c.next_step_id is None for c in step.options):
                can_finish = True
            for choice in step.options:
                target = choice.next_step_id
                if target in steps and target not in reachable:
                    reachable.add(target)
                    queue.append(target)

        for step_id in steps:
            if step_id not in reachable:
                issues.append(f"step {step_id!r} is unreachable from entry step {entry!r}")
        if not can_finish:
            issues.append("no terminal choice is reachable from the entry step")
        return issues

    @classmethod
    def ensure_valid(cls, content: Content) -> None:
        issues = cls.validate(content)
        if issues:
            logger.warning("Rejected scenario", extra={"content_id": content.id, "issues": issues})
            raise InvalidInputError("malformed scenario: " + "; ".join(issues))
