"""Achievement unlock rules.

The evaluator is advisory: it says which achievements a completion earns
that the user does not hold yet. Recording the unlock and paying the bonus
exactly once is the coordinator's job.
"""

from collections.abc import Callable, Iterable

import structlog

from vibe_progression.catalog.achievements import ACHIEVEMENTS
from vibe_progression.errors import ValidationError
from vibe_progression.models.catalog import Achievement, TriggerKind
from vibe_progression.models.progress import CompletionEvent, UserProgress
from vibe_progression.progression.levels import level_for_xp
from vibe_progression.progression.streak import as_utc

logger = structlog.get_logger()

Rule = Callable[[Achievement, UserProgress, CompletionEvent], bool]


def _crossed(before: int, after: int, threshold: int | None) -> bool:
    return threshold is not None and before < threshold <= after


def _first_completion(achievement, state, event) -> bool:
    return event.first_ever_completion


def _speed_completion(achievement, state, event) -> bool:
    if event.time_limit_seconds is None or event.elapsed_seconds is None:
        return False
    return event.time_limit_seconds - event.elapsed_seconds > 0


def _streak(achievement, state, event) -> bool:
    return _crossed(event.streak_before, event.streak_after, achievement.threshold)


def _level_reached(achievement, state, event) -> bool:
    return _crossed(
        level_for_xp(state.xp), level_for_xp(event.xp_after), achievement.threshold
    )


def _all_categories(achievement, state, event) -> bool:
    return event.all_categories_completed


def _time_window(achievement, state, event) -> bool:
    if achievement.window is None:
        return False
    start, end = achievement.window
    return start <= as_utc(event.completed_at).hour < end


def _category_count(achievement, state, event) -> bool:
    if achievement.category is None or achievement.threshold is None:
        return False
    return event.category_counts.get(achievement.category, 0) >= achievement.threshold


def _category_mastery(achievement, state, event) -> bool:
    return achievement.category is not None and achievement.category in event.mastered_categories


def _perfect_scores(achievement, state, event) -> bool:
    return achievement.threshold is not None and event.perfect_score_count >= achievement.threshold


RULES: dict[TriggerKind, Rule] = {
    TriggerKind.FIRST_COMPLETION: _first_completion,
    TriggerKind.SPEED_COMPLETION: _speed_completion,
    TriggerKind.STREAK: _streak,
    TriggerKind.LEVEL_REACHED: _level_reached,
    TriggerKind.ALL_CATEGORIES: _all_categories,
    TriggerKind.TIME_WINDOW: _time_window,
    TriggerKind.CATEGORY_COUNT: _category_count,
    TriggerKind.CATEGORY_MASTERY: _category_mastery,
    TriggerKind.PERFECT_SCORES: _perfect_scores,
}


class AchievementEvaluator:
    """Decides which achievements a completion event unlocks.

    Args:
        achievements: Achievement catalog to evaluate.
    """

    def __init__(self, achievements: Iterable[Achievement] = ACHIEVEMENTS):
        self.achievements = tuple(achievements)

    def evaluate(self, state: UserProgress, event: CompletionEvent) -> frozenset[str]:
        """Achievement ids earned by ``event`` and not yet held in ``state``.

        Each rule is independent; one event may unlock several achievements.
        Calling again with a state that already holds an id never returns it.
        """
        if event.xp_after < state.xp:
            raise ValidationError(
                f"xp cannot decrease (before={state.xp}, after={event.xp_after})"
            )

        earned = set()
        for achievement in self.achievements:
            if achievement.id in state.unlocked_achievement_ids:
                continue
            rule = RULES.get(achievement.trigger)
            if rule is not None and rule(achievement, state, event):
                earned.add(achievement.id)

        if earned:
            logger.debug(
                "achievements_earned",
                user_id=state.user_id,
                challenge_id=event.challenge_id,
                achievements=sorted(earned),
            )
        return frozenset(earned)


def evaluate_achievements(state: UserProgress, event: CompletionEvent) -> frozenset[str]:
    """Evaluate ``event`` against the full achievement catalog."""
    return AchievementEvaluator().evaluate(state, event)
