"""Achievement catalog."""

from vibe_progression.models.catalog import Achievement, ChallengeCategory, TriggerKind

ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        id="first_steps",
        name="First Steps",
        description="Created your VibeCoding account",
        icon="👋",
        trigger=TriggerKind.ACCOUNT_CREATED,
    ),
    Achievement(
        id="first_challenge",
        name="First Blood",
        description="Completed your first challenge",
        icon="🎯",
        xp_bonus=25,
        trigger=TriggerKind.FIRST_COMPLETION,
    ),
    Achievement(
        id="prompt_apprentice",
        name="Prompt Apprentice",
        description="Complete 5 prompting challenges",
        icon="📝",
        xp_bonus=50,
        trigger=TriggerKind.CATEGORY_COUNT,
        category=ChallengeCategory.PROMPTING,
        threshold=5,
    ),
    Achievement(
        id="speed_demon",
        name="Speed Demon",
        description="Complete a speed challenge under time limit",
        icon="⚡",
        xp_bonus=75,
        trigger=TriggerKind.SPEED_COMPLETION,
    ),
    Achievement(
        id="perfectionist",
        name="Perfectionist",
        description="Get perfect score on 5 challenges",
        icon="💎",
        xp_bonus=100,
        trigger=TriggerKind.PERFECT_SCORES,
        threshold=5,
    ),
    Achievement(
        id="bug_hunter",
        name="Bug Hunter",
        description="Complete all debugging challenges",
        icon="🐛",
        xp_bonus=150,
        trigger=TriggerKind.CATEGORY_MASTERY,
        category=ChallengeCategory.DEBUGGING,
    ),
    Achievement(
        id="streak_3",
        name="On a Roll",
        description="Maintain a 3-day streak",
        icon="🔥",
        xp_bonus=50,
        trigger=TriggerKind.STREAK,
        threshold=3,
    ),
    Achievement(
        id="streak_7",
        name="Week Warrior",
        description="Maintain a 7-day streak",
        icon="🔥",
        xp_bonus=100,
        trigger=TriggerKind.STREAK,
        threshold=7,
    ),
    Achievement(
        id="streak_30",
        name="Monthly Master",
        description="Maintain a 30-day streak",
        icon="👑",
        xp_bonus=500,
        trigger=TriggerKind.STREAK,
        threshold=30,
    ),
    Achievement(
        id="level_up_2",
        name="Growing Strong",
        description="Reach Level 2 - Apprentice",
        icon="🌿",
        xp_bonus=25,
        trigger=TriggerKind.LEVEL_REACHED,
        threshold=2,
    ),
    Achievement(
        id="level_up_3",
        name="Developer Status",
        description="Reach Level 3 - Developer",
        icon="🌳",
        xp_bonus=50,
        trigger=TriggerKind.LEVEL_REACHED,
        threshold=3,
    ),
    Achievement(
        id="level_up_4",
        name="Expert Mode",
        description="Reach Level 4 - Expert",
        icon="⚡",
        xp_bonus=100,
        trigger=TriggerKind.LEVEL_REACHED,
        threshold=4,
    ),
    Achievement(
        id="level_up_5",
        name="Vibe Master",
        description="Reach Level 5 - Master",
        icon="🔮",
        xp_bonus=250,
        trigger=TriggerKind.LEVEL_REACHED,
        threshold=5,
    ),
    Achievement(
        id="all_categories",
        name="Well Rounded",
        description="Complete at least one challenge in each category",
        icon="🌈",
        xp_bonus=100,
        trigger=TriggerKind.ALL_CATEGORIES,
    ),
    Achievement(
        id="night_owl",
        name="Night Owl",
        description="Complete a challenge between midnight and 4 AM",
        icon="🦉",
        xp_bonus=25,
        secret=True,
        trigger=TriggerKind.TIME_WINDOW,
        window=(0, 4),
    ),
    Achievement(
        id="early_bird",
        name="Early Bird",
        description="Complete a challenge between 5 AM and 7 AM",
        icon="🐦",
        xp_bonus=25,
        secret=True,
        trigger=TriggerKind.TIME_WINDOW,
        window=(5, 7),
    ),
)

ACHIEVEMENTS_BY_ID: dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}
