"""XP to level mapping.

``level_for_xp`` is the only place a level is derived from XP. Storage,
achievements and the API all call it.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from vibe_progression.catalog.levels import LEVELS
from vibe_progression.errors import ValidationError
from vibe_progression.models.catalog import LevelInfo
from vibe_progression.models.progress import LevelProgress


def validate_level_table(levels: Sequence[LevelInfo]) -> None:
    """Check a level table is usable: levels 1..N, starting at 0 XP, strictly increasing."""
    if not levels:
        raise ValueError("level table is empty")
    if levels[0].xp_required != 0:
        raise ValueError("level 1 must start at 0 XP")
    for expected, info in enumerate(levels, start=1):
        if info.level != expected:
            raise ValueError(f"level table out of order at level {info.level}")
    for lower, upper in zip(levels, levels[1:]):
        if upper.xp_required <= lower.xp_required:
            raise ValueError(
                f"threshold for level {upper.level} must exceed level {lower.level}"
            )


validate_level_table(LEVELS)


def _check_xp(xp: int) -> None:
    if isinstance(xp, bool) or not isinstance(xp, int):
        raise ValidationError(f"xp must be an integer, got {type(xp).__name__}")
    if xp < 0:
        raise ValidationError(f"xp must be non-negative, got {xp}")


def level_for_xp(xp: int, levels: Sequence[LevelInfo] = LEVELS) -> int:
    """Highest level whose threshold is at or below ``xp``."""
    _check_xp(xp)
    for info in reversed(levels):
        if xp >= info.xp_required:
            return info.level
    return levels[0].level


def level_info(level: int, levels: Sequence[LevelInfo] = LEVELS) -> LevelInfo:
    """Display metadata for a level; unknown levels fall back to level 1."""
    for info in levels:
        if info.level == level:
            return info
    return levels[0]


def progress_toward(
    xp: int,
    level: int | None = None,
    levels: Sequence[LevelInfo] = LEVELS,
) -> LevelProgress:
    """Progress from ``level`` toward the next level.

    Args:
        xp: Cumulative XP.
        level: Level the XP belongs to. Defaults to ``level_for_xp(xp)``.
        levels: Level table.

    Returns:
        LevelProgress. At the top level ``needed`` is 0 and percentage is 100.
        The percentage is rounded half-up to one decimal.
    """
    _check_xp(xp)
    if level is None:
        level = level_for_xp(xp, levels)
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= len(levels):
        raise ValidationError(f"level must be between 1 and {len(levels)}, got {level!r}")

    floor = levels[level - 1].xp_required
    if xp < floor:
        raise ValidationError(f"xp {xp} is below the threshold of level {level}")

    current = xp - floor
    if level == len(levels):
        return LevelProgress(current=current, needed=0, percentage=100.0)

    needed = levels[level].xp_required - floor
    raw = min(Decimal(100), Decimal(current * 100) / Decimal(needed))
    percentage = float(raw.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return LevelProgress(current=current, needed=needed, percentage=percentage)
