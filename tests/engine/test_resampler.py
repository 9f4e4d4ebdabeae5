"""Tests for tsengine.engine.resampler."""

from datetime import date

import pytest

from tsengine.core.enums import Frequency
from tsengine.core.models import Observation
from tsengine.engine.resampler import bucket_end, resample


class TestBucketEnd:
    """Calendar bucket boundaries."""

    @pytest.mark.parametrize(
        ("day", "frequency", "expected"),
        [
            (date(2020, 2, 12), Frequency.DAILY, date(2020, 2, 12)),
            (date(2020, 2, 12), Frequency.WEEKLY, date(2020, 2, 16)),  # Wednesday -> Sunday
            (date(2020, 2, 16), Frequency.WEEKLY, date(2020, 2, 16)),  # Sunday stays
            (date(2020, 2, 12), Frequency.MONTHLY, date(2020, 2, 29)),  # leap year
            (date(2021, 2, 12), Frequency.MONTHLY, date(2021, 2, 28)),
            (date(2020, 5, 1), Frequency.QUARTERLY, date(2020, 6, 30)),
            (date(2020, 11, 15), Frequency.QUARTERLY, date(2020, 12, 31)),
            (date(2020, 7, 4), Frequency.ANNUAL, date(2020, 12, 31)),
        ],
    )
    def test_bucket_end(self, day, frequency, expected):
        """Each date maps to the last day of its period."""
        assert bucket_end(day, frequency) == expected


class TestResample:
    """Last value per bucket, ascending buckets."""

    def test_monthly_to_quarterly(self):
        """Six months -> two quarters carrying months 3 and 6."""
        points = [Observation(date(2020, m, 1), float(m)) for m in range(1, 7)]
        out = resample(points, Frequency.MONTHLY, Frequency.QUARTERLY)
        assert out == [Observation(date(2020, 3, 31), 3.0), Observation(date(2020, 6, 30), 6.0)]

    def test_last_value_wins_even_when_missing(self):
        """A missing last observation makes the bucket missing."""
        points = [Observation(date(2020, 1, 31), 1.0), Observation(date(2020, 3, 31), None)]
        out = resample(points, Frequency.MONTHLY, Frequency.QUARTERLY)
        assert out == [Observation(date(2020, 3, 31), None)]

    def test_daily_to_weekly(self):
        """Daily points group into Sunday-ending weeks."""
        points = [Observation(date(2020, 2, d), float(d)) for d in range(10, 18)]
        out = resample(points, Frequency.DAILY, Frequency.WEEKLY)
        assert out == [Observation(date(2020, 2, 16), 16.0), Observation(date(2020, 2, 23), 17.0)]

    def test_to_annual(self):
        """Quarterly -> annual."""
        points = [Observation(date(2019, 12, 31), 4.0), Observation(date(2020, 3, 31), 5.0)]
        out = resample(points, Frequency.QUARTERLY, Frequency.ANNUAL)
        assert [p.date for p in out] == [date(2019, 12, 31), date(2020, 12, 31)]

    @pytest.mark.parametrize("target", [Frequency.NATIVE, Frequency.MONTHLY])
    def test_noop_returns_input(self, target):
        """NATIVE or same frequency returns the input object itself."""
        points = [Observation(date(2020, 1, 31), 1.0)]
        assert resample(points, Frequency.MONTHLY, target) is points

    def test_empty(self):
        """Empty input gives empty output."""
        assert list(resample([], Frequency.DAILY, Frequency.ANNUAL)) == []
