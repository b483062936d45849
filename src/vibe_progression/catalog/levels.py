"""Level table."""

from vibe_progression.models.catalog import LevelInfo

LEVELS: tuple[LevelInfo, ...] = (
    LevelInfo(
        level=1,
        name="Sprout",
        icon="🌱",
        description="Beginning your vibe coding journey",
        xp_required=0,
        color="#94a3b8",
    ),
    LevelInfo(
        level=2,
        name="Apprentice",
        icon="🌿",
        description="Learning the art of AI prompting",
        xp_required=500,
        color="#22c55e",
    ),
    LevelInfo(
        level=3,
        name="Developer",
        icon="🌳",
        description="Building real features with AI",
        xp_required=1500,
        color="#3b82f6",
    ),
    LevelInfo(
        level=4,
        name="Expert",
        icon="⚡",
        description="Mastering complex AI workflows",
        xp_required=3500,
        color="#a855f7",
    ),
    LevelInfo(
        level=5,
        name="Master",
        icon="🔮",
        description="The pinnacle of vibe coding",
        xp_required=7000,
        color="#f97316",
    ),
)

MAX_LEVEL = LEVELS[-1].level
