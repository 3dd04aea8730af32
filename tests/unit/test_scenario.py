"""Unit tests for the scenario state machine and scenario sessions."""

import pytest

from cogni.domain.content import Content, ContentKind, ScenarioChoice, ScenarioStep
from cogni.domain.errors import InvalidInputError
from cogni.engines.scenario import ScenarioSession, ScenarioStateMachine
from tests.factories import make_content, make_scenario


def scenario(steps, entry=None) -> Content:
    return Content(
        id="sc",
        title="Scenario",
        kind=ContentKind.SCENARIO,
        author_id="teacher-1",
        scenario_steps=steps,
        entry_step_id=entry,
    )


def step(step_id, *targets):
    """A step whose options point at the given targets (None = terminal)."""
    return ScenarioStep(
        id=step_id,
        text=f"Step {step_id}",
        options=[
            ScenarioChoice(text=f"to {t}", impact=i, feedback=f"fb {step_id}->{t}", next_step_id=t)
            for i, t in enumerate(targets)
        ],
    )


class TestTransition:

    def test_non_terminal_choice_moves_to_next_step(self):
        content = make_scenario()
        transition = ScenarioStateMachine.transition(content, "s1", 0)

        assert transition.next_step_id == "s2"
        assert transition.feedback == "Balanced"
        assert transition.impact == 5
        assert transition.is_terminal is False

    def test_terminal_choice_ends_with_its_feedback(self):
        content = make_scenario()
        transition = ScenarioStateMachine.transition(content, "s1", 1)

        assert transition.is_terminal is True
        assert transition.next_step_id is None
        assert transition.outcome.feedback == "Isolating"
        assert transition.outcome.impact == -5

    def test_unknown_step_is_malformed(self):
        with pytest.raises(InvalidInputError, match="malformed scenario"):
            ScenarioStateMachine.transition(make_scenario(), "nope", 0)

    @pytest.mark.parametrize("index", [-1, 2, 10])
    def test_choice_out_of_range_is_malformed(self, index):
        with pytest.raises(InvalidInputError, match="malformed scenario"):
            ScenarioStateMachine.transition(make_scenario(), "s1", index)

    def test_dangling_target_is_malformed(self):
        content = scenario([step("a", "ghost")])
        with pytest.raises(InvalidInputError, match="missing step"):
            ScenarioStateMachine.transition(content, "a", 0)

    def test_non_scenario_content_rejected(self):
        with pytest.raises(InvalidInputError, match="not a scenario"):
            ScenarioStateMachine.transition(make_content(), "s1", 0)

    def test_entry_step_defaults_to_first(self):
        assert ScenarioStateMachine.entry_step(make_scenario()).id == "s1"

    def test_explicit_entry_step(self):
        content = scenario([step("a", None), step("b", "a")], entry="b")
        assert ScenarioStateMachine.entry_step(content).id == "b"


class TestValidate:

    def test_valid_graph_has_no_issues(self):
        assert ScenarioStateMachine.validate(make_scenario()) == []

    def test_cycle_with_exit_is_valid(self):
        content = scenario([step("a", "b"), step("b", "a", None)])
        assert ScenarioStateMachine.validate(content) == []

    def test_dangling_target_reported(self):
        issues = ScenarioStateMachine.validate(scenario([step("a", "ghost", None)]))
        assert any("ghost" in issue for issue in issues)

    def test_unreachable_step_reported(self):
        issues = ScenarioStateMachine.validate(scenario([step("a", None), step("island", None)]))
        assert any("unreachable" in issue for issue in issues)

    def test_cycle_without_exit_reported(self):
        issues = ScenarioStateMachine.validate(scenario([step("a", "b"), step("b", "a")]))
        assert any("no terminal" in issue for issue in issues)

    def test_ensure_valid_raises(self):
        with pytest.raises(InvalidInputError, match="malformed scenario"):
            ScenarioStateMachine.ensure_valid(scenario([step("a", "b"), step("b", "a")]))


class TestScenarioSession:

    def test_walk_to_terminal(self):
        content = make_scenario()
        session = ScenarioSession.start("u1", content)
        assert session.current_step_id == "s1"

        session.choose(content, 0)
        assert session.current_step_id == "s2"
        assert session.finished is False

        final = session.choose(content, 0)
        assert final.is_terminal
        assert session.finished is True
        assert session.outcome.feedback == "Focused"
        assert session.path == ["s1", "s2"]

    def test_finished_session_rejects_choices(self):
        content = make_scenario()
        session = ScenarioSession.start("u1", content)
        session.choose(content, 1)
        with pytest.raises(InvalidInputError, match="already finished"):
            session.choose(content, 0)

    def test_dead_end_step_finishes_session(self):
        content = scenario([step("a", "end"), step("end")])
        session = ScenarioSession.start("u1", content)
        session.choose(content, 0)

        assert session.finished is True
        assert session.outcome is None

    def test_cycle_capped_by_transition_limit(self):
        content = scenario([step("a", "b", None), step("b", "a")])
        session = ScenarioSession.start("u1", content)
        for _ in range(ScenarioSession.MAX_TRANSITIONS):
            session.choose(content, 0)
        with pytest.raises(InvalidInputError, match="exceeded"):
            session.choose(content, 0)

    def test_start_rejects_malformed_graph(self):
        with pytest.raises(InvalidInputError):
            ScenarioSession.start("u1", scenario([step("a", "b"), step("b", "a")]))

    def test_choose_with_other_content_rejected(self):
        content = make_scenario()
        session = ScenarioSession.start("u1", content)
        with pytest.raises(InvalidInputError, match="belongs to content"):
            session.choose(make_scenario("other"), 0)

    def test_bad_choice_leaves_session_unchanged(self):
        content = make_scenario()
        session = ScenarioSession.start("u1", content)
        with pytest.raises(InvalidInputError):
            session.choose(content, 7)
        assert session.current_step_id == "s1"
        assert session.path == ["s1"]
