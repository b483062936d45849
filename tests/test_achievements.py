"""Tests for achievement unlock rules."""

from datetime import datetime, timedelta, timezone

import pytest

from vibe_progression.errors import ValidationError
from vibe_progression.models.progress import CompletionEvent, UserProgress
from vibe_progression.progression.achievements import (
    AchievementEvaluator,
    evaluate_achievements,
)

NOON = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_event(**overrides) -> CompletionEvent:
    values = {"challenge_id": "prompt-basics-1", "xp_after": 0, "completed_at": NOON}
    values.update(overrides)
    return CompletionEvent(**values)


@pytest.fixture
def evaluator():
    return AchievementEvaluator()


@pytest.fixture
def fresh_user():
    return UserProgress(user_id="u1")


class TestCompletionRules:
    def test_first_completion(self, evaluator, fresh_user):
        earned = evaluator.evaluate(fresh_user, make_event(first_ever_completion=True))
        assert earned == {"first_challenge"}

    def test_nothing_for_plain_completion(self, evaluator, fresh_user):
        assert evaluator.evaluate(fresh_user, make_event()) == frozenset()

    def test_speed_within_limit(self, evaluator, fresh_user):
        event = make_event(time_limit_seconds=300, elapsed_seconds=120)
        assert "speed_demon" in evaluator.evaluate(fresh_user, event)

    def test_speed_at_limit_does_not_count(self, evaluator, fresh_user):
        event = make_event(time_limit_seconds=300, elapsed_seconds=300)
        assert "speed_demon" not in evaluator.evaluate(fresh_user, event)

    def test_speed_needs_a_time_limit(self, evaluator, fresh_user):
        assert "speed_demon" not in evaluator.evaluate(
            fresh_user, make_event(elapsed_seconds=5)
        )

    def test_all_categories(self, evaluator, fresh_user):
        earned = evaluator.evaluate(fresh_user, make_event(all_categories_completed=True))
        assert earned == {"all_categories"}

    def test_category_count_and_mastery(self, evaluator, fresh_user):
        event = make_event(
            category_counts={"prompting": 5},
            mastered_categories={"debugging"},
        )
        assert evaluator.evaluate(fresh_user, event) == {"prompt_apprentice", "bug_hunter"}

    def test_perfect_scores(self, evaluator, fresh_user):
        assert "perfectionist" not in evaluator.evaluate(
            fresh_user, make_event(perfect_score_count=4)
        )
        assert "perfectionist" in evaluator.evaluate(
            fresh_user, make_event(perfect_score_count=5)
        )


class TestStreakRules:
    def test_crossing_three(self, evaluator, fresh_user):
        event = make_event(streak_before=2, streak_after=3)
        assert evaluator.evaluate(fresh_user, event) == {"streak_3"}

    def test_recomputed_same_day_is_not_a_crossing(self, evaluator, fresh_user):
        event = make_event(streak_before=3, streak_after=3)
        assert evaluator.evaluate(fresh_user, event) == frozenset()

    def test_jump_unlocks_every_threshold_passed(self, evaluator, fresh_user):
        event = make_event(streak_before=2, streak_after=30)
        assert evaluator.evaluate(fresh_user, event) == {"streak_3", "streak_7", "streak_30"}


class TestLevelRules:
    def test_two_level_jump_unlocks_both(self, evaluator):
        state = UserProgress(user_id="u1", xp=600, level=2)
        earned = evaluator.evaluate(state, make_event(xp_after=3600))
        assert earned == {"level_up_3", "level_up_4"}

    def test_single_level(self, evaluator, fresh_user):
        assert evaluator.evaluate(fresh_user, make_event(xp_after=500)) == {"level_up_2"}

    def test_no_level_change(self, evaluator):
        state = UserProgress(user_id="u1", xp=600, level=2)
        assert evaluator.evaluate(state, make_event(xp_after=700)) == frozenset()

    def test_xp_decrease_rejected(self, evaluator):
        state = UserProgress(user_id="u1", xp=600, level=2)
        with pytest.raises(ValidationError):
            evaluator.evaluate(state, make_event(xp_after=100))


class TestTimeWindowRules:
    @pytest.mark.parametrize(
        "hour,expected",
        [
            (0, {"night_owl"}),
            (3, {"night_owl"}),
            (4, set()),
            (5, {"early_bird"}),
            (6, {"early_bird"}),
            (7, set()),
            (23, set()),
        ],
    )
    def test_utc_hour_windows(self, evaluator, fresh_user, hour, expected):
        event = make_event(completed_at=datetime(2026, 3, 10, hour, 30, tzinfo=timezone.utc))
        assert evaluator.evaluate(fresh_user, event) == expected

    def test_aware_time_is_converted_to_utc(self, evaluator, fresh_user):
        # 23:30 at UTC-4 is 03:30 UTC
        eastern = timezone(timedelta(hours=-4))
        event = make_event(completed_at=datetime(2026, 3, 9, 23, 30, tzinfo=eastern))
        assert evaluator.evaluate(fresh_user, event) == {"night_owl"}

    def test_naive_time_is_read_as_utc(self, evaluator, fresh_user):
        event = make_event(completed_at=datetime(2026, 3, 10, 5, 15))
        assert evaluator.evaluate(fresh_user, event) == {"early_bird"}


class TestIdempotence:
    def test_held_achievements_are_never_returned(self, evaluator):
        state = UserProgress(
            user_id="u1",
            unlocked_achievement_ids={"first_challenge", "level_up_2"},
        )
        event = make_event(first_ever_completion=True, xp_after=600)
        assert evaluator.evaluate(state, event) == frozenset()

    def test_repeat_evaluation_is_stable(self, evaluator, fresh_user):
        event = make_event(first_ever_completion=True, streak_before=2, streak_after=3)
        assert evaluator.evaluate(fresh_user, event) == evaluator.evaluate(fresh_user, event)

    def test_module_level_helper(self, fresh_user):
        earned = evaluate_achievements(fresh_user, make_event(first_ever_completion=True))
        assert earned == {"first_challenge"}
