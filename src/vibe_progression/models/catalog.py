"""Static catalog models: levels, challenges, achievements."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class LevelInfo(BaseModel):
    """One row of the level table."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1)
    name: str
    icon: str
    description: str
    xp_required: int = Field(ge=0)
    color: str


class ChallengeCategory(StrEnum):
    """Challenge categories."""

    PROMPTING = "prompting"
    DEBUGGING = "debugging"
    BUILDING = "building"
    REFACTORING = "refactoring"
    SPEED = "speed"


class Challenge(BaseModel):
    """A learnable challenge."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    category: ChallengeCategory
    difficulty: int = Field(ge=1, le=5)
    xp_reward: int = Field(ge=0)
    time_limit_seconds: int | None = None
    tags: tuple[str, ...] = ()


class TriggerKind(StrEnum):
    """What kind of event unlocks an achievement."""

    ACCOUNT_CREATED = "account_created"
    FIRST_COMPLETION = "first_completion"
    SPEED_COMPLETION = "speed_completion"
    LEVEL_REACHED = "level_reached"
    STREAK = "streak"
    ALL_CATEGORIES = "all_categories"
    TIME_WINDOW = "time_window"
    CATEGORY_COUNT = "category_count"
    CATEGORY_MASTERY = "category_mastery"
    PERFECT_SCORES = "perfect_scores"


class Achievement(BaseModel):
    """Catalog entry for an unlockable achievement.

    ``threshold`` is the level, streak length or count the trigger compares
    against. ``window`` is a half-open UTC hour range ``(start, end)`` for
    time-window triggers.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    xp_bonus: int = Field(default=0, ge=0)
    secret: bool = False
    trigger: TriggerKind
    threshold: int | None = None
    category: ChallengeCategory | None = None
    window: tuple[int, int] | None = None
