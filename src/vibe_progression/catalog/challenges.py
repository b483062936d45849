"""Challenge catalog."""

from vibe_progression.models.catalog import Challenge, ChallengeCategory

CHALLENGES: tuple[Challenge, ...] = (
    # Level 1 - Sprout
    Challenge(
        id="prompt-basics-1",
        title="Your First Prompt",
        description="Learn how to write a clear, effective prompt for an AI assistant",
        category=ChallengeCategory.PROMPTING,
        difficulty=1,
        xp_reward=50,
        tags=("beginner", "prompting", "fundamentals"),
    ),
    Challenge(
        id="prompt-basics-2",
        title="Context is King",
        description="Learn to provide context in your prompts for better results",
        category=ChallengeCategory.PROMPTING,
        difficulty=1,
        xp_reward=75,
        tags=("beginner", "prompting", "debugging"),
    ),
    Challenge(
        id="prompt-basics-3",
        title="Breaking Down Tasks",
        description="Learn to decompose complex requests into smaller prompts",
        category=ChallengeCategory.PROMPTING,
        difficulty=1,
        xp_reward=100,
        tags=("beginner", "prompting", "planning"),
    ),
    # Level 2 - Apprentice
    Challenge(
        id="chain-prompting-1",
        title="Prompt Chaining",
        description="Build on previous AI outputs to create complex solutions",
        category=ChallengeCategory.BUILDING,
        difficulty=2,
        xp_reward=150,
        tags=("intermediate", "prompting", "chaining"),
    ),
    Challenge(
        id="debug-ai-1",
        title="AI Generated Bug Hunt",
        description="Learn to identify and fix issues in AI-generated code",
        category=ChallengeCategory.DEBUGGING,
        difficulty=2,
        xp_reward=175,
        tags=("intermediate", "debugging", "async"),
    ),
    Challenge(
        id="refactor-ai-1",
        title="Prompt for Refactoring",
        description="Learn to write prompts that improve existing code",
        category=ChallengeCategory.REFACTORING,
        difficulty=2,
        xp_reward=150,
        tags=("intermediate", "refactoring", "best-practices"),
    ),
    # Level 3 - Developer
    Challenge(
        id="feature-complete-1",
        title="Full Feature Build",
        description="Use AI to build a complete feature from scratch",
        category=ChallengeCategory.BUILDING,
        difficulty=3,
        xp_reward=300,
        tags=("advanced", "building", "react", "css"),
    ),
    Challenge(
        id="speed-challenge-1",
        title="Speed Coding: Form Validation",
        description="Build a form validation system as fast as possible",
        category=ChallengeCategory.SPEED,
        difficulty=3,
        xp_reward=250,
        time_limit_seconds=300,
        tags=("advanced", "speed", "forms", "validation"),
    ),
    # Level 4 - Expert
    Challenge(
        id="architecture-1",
        title="System Architecture",
        description="Design a complete system architecture with AI assistance",
        category=ChallengeCategory.BUILDING,
        difficulty=4,
        xp_reward=500,
        tags=("expert", "architecture", "system-design"),
    ),
    Challenge(
        id="complex-debug-1",
        title="Production Bug Hunt",
        description="Debug a complex, multi-file issue with AI assistance",
        category=ChallengeCategory.DEBUGGING,
        difficulty=4,
        xp_reward=450,
        tags=("expert", "debugging", "production", "performance"),
    ),
    # Level 5 - Master
    Challenge(
        id="full-app-1",
        title="Full Application Build",
        description="Build a complete application from concept to deployment",
        category=ChallengeCategory.BUILDING,
        difficulty=5,
        xp_reward=1000,
        tags=("master", "full-stack", "complete-app"),
    ),
)

CHALLENGES_BY_ID: dict[str, Challenge] = {c.id: c for c in CHALLENGES}

CATEGORY_INFO: dict[ChallengeCategory, dict[str, str]] = {
    ChallengeCategory.PROMPTING: {"name": "Prompt Crafting", "icon": "✨", "color": "#8b5cf6"},
    ChallengeCategory.DEBUGGING: {"name": "Bug Hunting", "icon": "🐛", "color": "#ef4444"},
    ChallengeCategory.BUILDING: {"name": "Feature Building", "icon": "🏗️", "color": "#22c55e"},
    ChallengeCategory.REFACTORING: {"name": "Code Refactoring", "icon": "🔄", "color": "#3b82f6"},
    ChallengeCategory.SPEED: {"name": "Speed Coding", "icon": "⚡", "color": "#f59e0b"},
}


def challenges_up_to_level(level: int) -> list[Challenge]:
    """Challenges whose difficulty does not exceed ``level``."""
    return [c for c in CHALLENGES if c.difficulty <= level]
