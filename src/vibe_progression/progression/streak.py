"""Daily activity streaks, counted on UTC calendar days."""

from datetime import datetime, timezone


def as_utc(moment: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def next_streak(current: int, last_active_at: datetime | None, now: datetime) -> int:
    """Streak length after activity at ``now``.

    Same UTC day keeps the streak, the following day extends it, and any
    longer gap (or no previous activity) starts over at 1.
    """
    if last_active_at is None or current <= 0:
        return 1
    gap = (as_utc(now).date() - as_utc(last_active_at).date()).days
    if gap <= 0:
        return current
    if gap == 1:
        return current + 1
    return 1
