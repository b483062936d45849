"""User progress models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Role(StrEnum):
    """Roles supplied by the session service."""

    USER = "USER"
    ADMIN = "ADMIN"


class Actor(BaseModel):
    """Authenticated identity acting on a request."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role = Role.USER

    @property
    def is_privileged(self) -> bool:
        return self.role == Role.ADMIN

    def may_act_for(self, user_id: str) -> bool:
        return self.is_privileged or self.user_id == user_id


class CompletionStatus(StrEnum):
    """Completion record lifecycle states."""

    COMPLETED = "COMPLETED"


class CompletionRecord(BaseModel):
    """Durable fact that a user passed a challenge at least once."""

    user_id: str
    challenge_id: str
    status: CompletionStatus = CompletionStatus.COMPLETED
    best_score: int | None = None
    xp_awarded: int = 0
    completed_at: datetime
    submitted_at: datetime


class UserProgress(BaseModel):
    """A user's durable progression state."""

    user_id: str
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    completed_challenge_ids: set[str] = Field(default_factory=set)
    unlocked_achievement_ids: set[str] = Field(default_factory=set)
    current_streak_days: int = Field(default=0, ge=0)
    last_active_at: datetime | None = None


class LevelProgress(BaseModel):
    """Progress from the current level toward the next one."""

    current: int
    needed: int
    percentage: float


class CompletionEvent(BaseModel):
    """What happened on a completion, as seen by the achievement evaluator.

    ``completed_at`` is read in UTC; naive values are taken to be UTC already.
    """

    challenge_id: str
    first_ever_completion: bool = False
    xp_after: int = Field(ge=0)
    time_limit_seconds: int | None = None
    elapsed_seconds: float | None = None
    completed_at: datetime
    streak_before: int = Field(default=0, ge=0)
    streak_after: int = Field(default=0, ge=0)
    all_categories_completed: bool = False
    category_counts: dict[str, int] = Field(default_factory=dict)
    mastered_categories: set[str] = Field(default_factory=set)
    perfect_score_count: int = Field(default=0, ge=0)


class CompletionOutcome(BaseModel):
    """Result of persisting a completion."""

    new_xp: int
    new_level: int
    first_completion: bool
    unlocked_achievements: list[str] = Field(default_factory=list)
