"""Progress persistence coordinator.

The only component that writes progression state. A completion is recorded
in one transaction: the completion-record insert is the gate, and XP, level,
streak and achievement unlocks are only applied on the branch where that
insert created the row. A repeated or concurrent submission of the same
(user, challenge) pair only refreshes the record; a resubmission at full
marks can still unlock perfect-score achievements, never completion XP.
"""

import sqlite3
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone

import structlog

from vibe_progression.catalog.achievements import ACHIEVEMENTS
from vibe_progression.catalog.challenges import CHALLENGES_BY_ID
from vibe_progression.errors import (
    AuthorizationError,
    ConsistencyError,
    NotFoundError,
    ValidationError,
)
from vibe_progression.models.catalog import Achievement, Challenge, TriggerKind
from vibe_progression.models.progress import (
    Actor,
    CompletionEvent,
    CompletionOutcome,
    UserProgress,
)
from vibe_progression.progression.achievements import AchievementEvaluator
from vibe_progression.progression.levels import level_for_xp
from vibe_progression.progression.streak import as_utc, next_streak
from vibe_progression.storage.progress_store import ProgressStore

logger = structlog.get_logger()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _require_id(name: str, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string")


def _authorize(actor: Actor, user_id: str) -> None:
    if not actor.may_act_for(user_id):
        logger.warning(
            "authorization_denied",
            actor_id=actor.user_id,
            role=actor.role,
            user_id=user_id,
        )
        raise AuthorizationError(f"{actor.user_id} may not act for {user_id}")


class ProgressCoordinator:
    """Records completions and unlocks against a ProgressStore.

    Args:
        store: Durable store.
        challenges: Challenge catalog by id.
        achievements: Achievement catalog.
        clock: Returns the current time; must be timezone-aware.
    """

    def __init__(
        self,
        store: ProgressStore,
        challenges: Mapping[str, Challenge] = CHALLENGES_BY_ID,
        achievements: Iterable[Achievement] = ACHIEVEMENTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.challenges = challenges
        self.achievements = {a.id: a for a in achievements}
        self.clock = clock
        self.evaluator = AchievementEvaluator(self.achievements.values())
        self.level_evaluator = AchievementEvaluator(
            a for a in self.achievements.values() if a.trigger == TriggerKind.LEVEL_REACHED
        )
        self.perfect_evaluator = AchievementEvaluator(
            a for a in self.achievements.values() if a.trigger == TriggerKind.PERFECT_SCORES
        )

    def register_user(self, user_id: str) -> UserProgress:
        """Create the user's progress row and grant account-creation achievements once."""
        _require_id("user_id", user_id)
        now = self.clock()
        with self.store.transaction() as con:
            created = self.store.insert_user(con, user_id, now)
            if created:
                granted = [
                    a for a in self.achievements.values()
                    if a.trigger == TriggerKind.ACCOUNT_CREATED
                ]
                bonus = self._grant(con, user_id, granted, now)
                if bonus:
                    xp = self.store.add_xp(con, user_id, bonus)
                    self.store.set_level(con, user_id, level_for_xp(xp))
            progress = self.store.read_progress(con, user_id)
        logger.info("user_registered", user_id=user_id, created=created)
        return progress

    def get_progress(self, user_id: str, *, actor: Actor) -> UserProgress:
        _require_id("user_id", user_id)
        _authorize(actor, user_id)
        progress = self.store.load_progress(user_id)
        if progress is None:
            raise NotFoundError(f"unknown user {user_id}")
        return progress

    def record_completion(
        self,
        user_id: str,
        challenge_id: str,
        xp_earned: int,
        *,
        actor: Actor,
        score: int | None = None,
        elapsed_seconds: float | None = None,
        completed_at: datetime | None = None,
    ) -> CompletionOutcome:
        """Persist a passed challenge and award its XP at most once.

        Args:
            user_id: User who passed the challenge.
            challenge_id: Challenge that was passed.
            xp_earned: XP for a first completion.
            actor: Authenticated identity making the call.
            score: Score of this submission, kept as the best score.
            elapsed_seconds: Time taken, for timed challenges.
            completed_at: Completion time; defaults to now (UTC).

        Returns:
            New XP and level, whether this was the first completion of the
            pair, and the achievements unlocked by it.

        Raises:
            ValidationError: Bad identifiers or amounts.
            AuthorizationError: Actor may not act for ``user_id``.
            NotFoundError: Unknown user or challenge.
            TransientStorageError: Storage busy or unavailable; safe to retry.
        """
        _require_id("user_id", user_id)
        _require_id("challenge_id", challenge_id)
        if isinstance(xp_earned, bool) or not isinstance(xp_earned, int) or xp_earned < 0:
            raise ValidationError(f"xp_earned must be a non-negative integer, got {xp_earned!r}")
        if score is not None and not 0 <= score <= 100:
            raise ValidationError(f"score must be between 0 and 100, got {score}")
        if elapsed_seconds is not None and elapsed_seconds < 0:
            raise ValidationError("elapsed_seconds must be non-negative")
        _authorize(actor, user_id)

        challenge = self.challenges.get(challenge_id)
        if challenge is None:
            raise NotFoundError(f"unknown challenge {challenge_id}")
        now = as_utc(completed_at) if completed_at is not None else self.clock()

        with self.store.transaction() as con:
            state = self.store.read_progress(con, user_id)
            if state is None:
                raise NotFoundError(f"unknown user {user_id}")

            inserted = self.store.insert_completion(
                con, user_id, challenge_id, xp_earned, score, now
            )
            if not inserted:
                self.store.touch_completion(con, user_id, challenge_id, score, now)
                unlocked, xp = [], state.xp
                if score == 100:
                    unlocked, xp = self._unlock_perfect(con, state, challenge, now)
                logger.info(
                    "completion_resubmitted",
                    user_id=user_id,
                    challenge_id=challenge_id,
                    unlocked=unlocked,
                )
                return CompletionOutcome(
                    new_xp=xp,
                    new_level=level_for_xp(xp),
                    first_completion=False,
                    unlocked_achievements=unlocked,
                )

            xp = self.store.add_xp(con, user_id, xp_earned)
            streak = next_streak(state.current_streak_days, state.last_active_at, now)
            event = self._build_event(con, state, challenge, xp, streak, elapsed_seconds, now)
            unlocked, xp = self._unlock_earned(con, state, event, now)
            level = level_for_xp(xp)
            self.store.update_standing(con, user_id, level, streak, now)

        logger.info(
            "completion_recorded",
            user_id=user_id,
            challenge_id=challenge_id,
            xp_earned=xp_earned,
            xp=xp,
            level=level,
            unlocked=unlocked,
        )
        return CompletionOutcome(
            new_xp=xp,
            new_level=level,
            first_completion=True,
            unlocked_achievements=unlocked,
        )

    def unlock_achievements(
        self,
        user_id: str,
        achievement_ids: Iterable[str],
        *,
        actor: Actor,
    ) -> list[str]:
        """Record caller-decided unlocks; each id is stored and bonused at most once.

        Returns:
            Ids that were newly unlocked by this call, including any level
            achievements reached through the bonuses.
        """
        _require_id("user_id", user_id)
        _authorize(actor, user_id)
        requested = []
        for achievement_id in achievement_ids:
            achievement = self.achievements.get(achievement_id)
            if achievement is None:
                raise NotFoundError(f"unknown achievement {achievement_id}")
            requested.append(achievement)
        now = self.clock()

        with self.store.transaction() as con:
            state = self.store.read_progress(con, user_id)
            if state is None:
                raise NotFoundError(f"unknown user {user_id}")
            before = set(state.unlocked_achievement_ids)
            bonus = self._grant(con, user_id, requested, now)
            xp = self.store.add_xp(con, user_id, bonus) if bonus else state.xp
            state.unlocked_achievement_ids |= {a.id for a in requested}
            event = CompletionEvent(challenge_id="", xp_after=xp, completed_at=now)
            _, xp = self._settle_levels(con, state, event, now)
            self.store.set_level(con, user_id, level_for_xp(xp))
            unlocked = sorted(
                self.store.read_progress(con, user_id).unlocked_achievement_ids - before
            )

        if unlocked:
            logger.info("achievements_unlocked", user_id=user_id, achievements=unlocked)
        return unlocked

    def check_consistency(self, user_id: str) -> None:
        """Verify stored XP equals awarded completion XP plus achievement bonuses.

        Raises:
            ConsistencyError: The two disagree. Logged at critical level and
                left untouched for investigation.
        """
        with self.store.transaction(write=False) as con:
            state = self.store.read_progress(con, user_id)
            if state is None:
                raise NotFoundError(f"unknown user {user_id}")
            expected = self.store.ledger_total(con, user_id)
        if expected != state.xp:
            logger.critical(
                "progress_ledger_mismatch",
                user_id=user_id,
                stored_xp=state.xp,
                ledger_xp=expected,
            )
            raise ConsistencyError(
                f"user {user_id} holds {state.xp} XP but the ledger totals {expected}"
            )

    def _build_event(
        self,
        con: sqlite3.Connection,
        state: UserProgress,
        challenge: Challenge,
        xp_after: int,
        streak: int,
        elapsed_seconds: float | None,
        now: datetime,
    ) -> CompletionEvent:
        completed = state.completed_challenge_ids | {challenge.id}
        known = [self.challenges[c] for c in completed if c in self.challenges]
        counts = Counter(c.category.value for c in known)
        all_categories = {c.category for c in self.challenges.values()}
        mastered = {
            category.value
            for category in all_categories
            if all(
                c.id in completed
                for c in self.challenges.values()
                if c.category == category
            )
        }
        perfect = self._perfect_count(con, state.user_id)
        return CompletionEvent(
            challenge_id=challenge.id,
            first_ever_completion=not state.completed_challenge_ids,
            xp_after=xp_after,
            time_limit_seconds=challenge.time_limit_seconds,
            elapsed_seconds=elapsed_seconds,
            completed_at=now,
            streak_before=state.current_streak_days,
            streak_after=streak,
            all_categories_completed={c.category for c in known} >= all_categories,
            category_counts=dict(counts),
            mastered_categories=mastered,
            perfect_score_count=perfect,
        )

    def _perfect_count(self, con: sqlite3.Connection, user_id: str) -> int:
        return sum(
            1 for record in self.store.list_completions(con, user_id)
            if record.best_score == 100
        )

    def _unlock_perfect(
        self,
        con: sqlite3.Connection,
        state: UserProgress,
        challenge: Challenge,
        now: datetime,
    ) -> tuple[list[str], int]:
        """Resubmission at full marks: only perfect-score achievements can unlock."""
        event = CompletionEvent(
            challenge_id=challenge.id,
            xp_after=state.xp,
            completed_at=now,
            streak_before=state.current_streak_days,
            streak_after=state.current_streak_days,
            perfect_score_count=self._perfect_count(con, state.user_id),
        )
        unlocked, xp = self._unlock_earned(con, state, event, now, self.perfect_evaluator)
        if unlocked:
            self.store.set_level(con, state.user_id, level_for_xp(xp))
        return unlocked, xp

    def _unlock_earned(
        self,
        con: sqlite3.Connection,
        state: UserProgress,
        event: CompletionEvent,
        now: datetime,
        evaluator: AchievementEvaluator | None = None,
    ) -> tuple[list[str], int]:
        earned = (evaluator or self.evaluator).evaluate(state, event)
        granted = [self.achievements[a] for a in sorted(earned)]
        bonus = self._grant(con, state.user_id, granted, now)
        xp = event.xp_after
        if bonus:
            xp = self.store.add_xp(con, state.user_id, bonus)
        held = state.model_copy(
            update={"unlocked_achievement_ids": state.unlocked_achievement_ids | earned}
        )
        cascaded, xp = self._settle_levels(
            con, held, event.model_copy(update={"xp_after": xp}), now
        )
        return sorted(earned) + cascaded, xp

    def _settle_levels(
        self,
        con: sqlite3.Connection,
        state: UserProgress,
        event: CompletionEvent,
        now: datetime,
    ) -> tuple[list[str], int]:
        """Unlock level achievements reached through bonus XP until nothing changes."""
        unlocked = []
        xp = event.xp_after
        held = set(state.unlocked_achievement_ids)
        while True:
            current = state.model_copy(update={"unlocked_achievement_ids": held})
            earned = self.level_evaluator.evaluate(
                current, event.model_copy(update={"xp_after": xp})
            )
            if not earned:
                return unlocked, xp
            granted = [self.achievements[a] for a in sorted(earned)]
            bonus = self._grant(con, state.user_id, granted, now)
            if bonus:
                xp = self.store.add_xp(con, state.user_id, bonus)
            held |= earned
            unlocked.extend(sorted(earned))

    def _grant(
        self,
        con: sqlite3.Connection,
        user_id: str,
        achievements: Iterable[Achievement],
        now: datetime,
    ) -> int:
        """Insert unlocks and return the total bonus of the ones not held before."""
        bonus = 0
        for achievement in achievements:
            if self.store.insert_achievement(con, user_id, achievement.id, achievement.xp_bonus, now):
                bonus += achievement.xp_bonus
        return bonus
