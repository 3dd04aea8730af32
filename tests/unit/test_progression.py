"""Unit tests for the progression engine."""

import pytest

from cogni.domain.errors import InvalidInputError
from cogni.domain.exam import PLACEMENT_CONTENT_ID, PLACEMENT_EXAM_ID
from cogni.domain.user import MAX_LEVEL, UserRole
from cogni.engines.assessment.progression import ProgressionEngine
from tests.factories import descriptive, make_exam, make_user, mcq


@pytest.fixture
def placement():
    return make_exam([mcq("p1"), mcq("p2"), descriptive("p3")], exam_id=PLACEMENT_EXAM_ID, content_id=PLACEMENT_CONTENT_ID)


@pytest.fixture
def quiz():
    return make_exam([mcq("q1")])


class TestLevelCurves:

    @pytest.mark.parametrize(
        "score, level",
        [(0, 1), (9, 1), (10, 1), (19, 1), (20, 2), (75, 7), (90, 9), (99, 9), (100, 10)],
    )
    def test_placement_level(self, score, level):
        assert ProgressionEngine.placement_level(score) == level

    @pytest.mark.parametrize(
        "xp, level",
        [(0, 1), (249, 1), (250, 2), (499, 2), (500, 3), (2249, 9), (2250, 10), (99999, MAX_LEVEL)],
    )
    def test_level_for_xp(self, xp, level):
        assert ProgressionEngine.level_for_xp(xp) == level


class TestPlacementAdvance:

    def test_placement_score_90_gives_level_9(self, newcomer, placement, now):
        user = ProgressionEngine.advance(newcomer, placement, 90, now=now)

        assert user.level == 9
        assert user.xp == 90
        assert len(user.score_history) == 1
        record = user.score_history[0]
        assert record.exam_id == PLACEMENT_EXAM_ID
        assert record.content_id == PLACEMENT_CONTENT_ID
        assert record.score == 90
        assert record.date == now

    def test_low_placement_floors_at_level_1(self, newcomer, placement):
        assert ProgressionEngine.advance(newcomer, placement, 5).level == 1

    def test_input_user_not_mutated(self, newcomer, placement):
        ProgressionEngine.advance(newcomer, placement, 90)
        assert newcomer.level == 0
        assert newcomer.xp == 0
        assert newcomer.score_history == []

    def test_second_placement_requires_retake(self, newcomer, placement):
        placed = ProgressionEngine.advance(newcomer, placement, 50)
        with pytest.raises(InvalidInputError, match="placement already completed"):
            ProgressionEngine.advance(placed, placement, 90)

    def test_retake_never_lowers_level(self, newcomer, placement):
        placed = ProgressionEngine.advance(newcomer, placement, 90)
        retaken = ProgressionEngine.advance(placed, placement, 20, retake=True)

        assert retaken.level == 9
        assert retaken.xp == 110
        assert len(retaken.score_history) == 2

    def test_retake_can_raise_level(self, newcomer, placement):
        placed = ProgressionEngine.advance(newcomer, placement, 30)
        assert ProgressionEngine.advance(placed, placement, 80, retake=True).level == 8


class TestRegularAdvance:

    def test_xp_accumulates_without_level_up(self, citizen, quiz):
        # citizen: level 2, xp 300
        user = ProgressionEngine.advance(citizen, quiz, 75)
        assert user.xp == 375
        assert user.level == 2

    def test_xp_crossing_threshold_raises_level(self, citizen, quiz):
        user = ProgressionEngine.advance(citizen, quiz, 100)
        user = ProgressionEngine.advance(user, quiz, 100)
        assert user.xp == 500
        assert user.level == 3

    def test_level_never_decreases(self, quiz):
        # Placed high with little xp; the xp curve must not pull the level down
        user = make_user(level=9, xp=90)
        advanced = ProgressionEngine.advance(user, quiz, 0)
        assert advanced.level == 9
        assert advanced.xp == 90

    def test_level_capped_at_max(self, quiz):
        user = make_user(level=MAX_LEVEL, xp=5000)
        assert ProgressionEngine.advance(user, quiz, 100).level == MAX_LEVEL

    def test_unplaced_user_stays_at_level_0(self, newcomer, quiz):
        user = ProgressionEngine.advance(newcomer, quiz, 100)
        assert user.level == 0
        assert user.xp == 100

    def test_teacher_progresses_like_anyone(self, quiz):
        teacher = make_user(role=UserRole.TEACHER, level=5, xp=1000)
        assert ProgressionEngine.advance(teacher, quiz, 100).level == 5
        assert ProgressionEngine.advance(teacher.model_copy(update={"xp": 1450}), quiz, 100).level == 7


class TestAdvanceEdges:

    def test_none_score_is_a_no_op(self, citizen, quiz):
        assert ProgressionEngine.advance(citizen, quiz, None) is citizen

    @pytest.mark.parametrize("score", [-1, 101, 1000])
    def test_out_of_range_score_rejected(self, citizen, quiz, score):
        with pytest.raises(InvalidInputError):
            ProgressionEngine.advance(citizen, quiz, score)

    def test_boundary_scores_accepted(self, citizen, quiz):
        assert ProgressionEngine.advance(citizen, quiz, 0).xp == 300
        assert ProgressionEngine.advance(citizen, quiz, 100).xp == 400


class TestDescribe:

    def test_level_change_summary(self, newcomer, placement):
        after = ProgressionEngine.advance(newcomer, placement, 90)
        change = ProgressionEngine.describe(newcomer, after, placement)

        assert change.leveled_up is True
        assert change.level_before == 0
        assert change.level_after == 9
        assert change.xp_gained == 90
        assert change.score == 90

    def test_nothing_applied_gives_none(self, citizen, quiz):
        assert ProgressionEngine.describe(citizen, citizen, quiz) is None
