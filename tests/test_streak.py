"""Tests for daily streak counting."""

from datetime import datetime, timedelta, timezone

from vibe_progression.progression.streak import as_utc, next_streak

DAY1 = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestNextStreak:
    def test_first_activity(self):
        assert next_streak(0, None, DAY1) == 1

    def test_same_day_keeps_streak(self):
        assert next_streak(4, DAY1, DAY1 + timedelta(hours=5)) == 4

    def test_next_day_extends(self):
        assert next_streak(4, DAY1, DAY1 + timedelta(days=1)) == 5

    def test_gap_resets(self):
        assert next_streak(4, DAY1, DAY1 + timedelta(days=2)) == 1

    def test_day_boundary_is_utc(self):
        late = datetime(2026, 3, 10, 23, 59, tzinfo=timezone.utc)
        early = datetime(2026, 3, 11, 0, 1, tzinfo=timezone.utc)
        assert next_streak(1, late, early) == 2

    def test_offset_times_use_utc_dates(self):
        # 20:00 at UTC-5 on the 10th is 01:00 UTC on the 11th
        local = datetime(2026, 3, 10, 20, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert next_streak(2, DAY1, local) == 3


class TestAsUtc:
    def test_naive_is_tagged(self):
        assert as_utc(datetime(2026, 1, 1, 3, 0)).tzinfo == timezone.utc

    def test_aware_is_converted(self):
        moment = datetime(2026, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(moment).hour == 1
