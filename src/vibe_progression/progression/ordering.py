"""Deterministic per-user ordering of content.

The output for a given (items, seed) pair is user-visible and must never
change: users see the same "recommended" order on every visit. Any change to
the arithmetic below reorders every existing user's list.

Known limitation: the summed seed and short LCG give visible bias for very
small lists (two or three items). That is accepted as is.
"""

from collections.abc import Sequence
from typing import TypeVar

from vibe_progression.catalog.challenges import challenges_up_to_level
from vibe_progression.errors import ValidationError
from vibe_progression.models.catalog import Challenge

T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def seed_value(seed: str) -> int:
    """Sum of the seed's UTF-16 code units."""
    encoded = seed.encode("utf-16-le")
    return sum(
        int.from_bytes(encoded[i:i + 2], "little") for i in range(0, len(encoded), 2)
    )


def seeded_shuffle(items: Sequence[T], seed: str) -> list[T]:
    """Stable pseudo-random permutation of ``items`` for ``seed``."""
    if not isinstance(seed, str):
        raise ValidationError("seed must be a string")

    result = list(items)
    state = seed_value(seed)
    for i in range(len(result) - 1, 0, -1):
        j = (state + i) % (i + 1)
        result[i], result[j] = result[j], result[i]
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
    return result


def recommend_challenges(level: int, seed: str, count: int = 3) -> list[Challenge]:
    """Challenges unlocked at ``level``, in the user's stable order, first ``count``."""
    if count < 0:
        raise ValidationError("count must be non-negative")
    return seeded_shuffle(challenges_up_to_level(level), seed)[:count]
