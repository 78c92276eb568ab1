"""Tests for the NSPIRE unit sampling table."""

import pytest

from nspire.sampling import MAX_SAMPLE_SIZE, UNIT_SAMPLE_TABLE, sample_size


class TestSampleSize:
    """Tests for sample_size()."""

    @pytest.mark.parametrize("total_units, expected", [
        (0, 0),
        (1, 1),
        (5, 5),
        (7, 6),
        (9, 7),
        (10, 8),
        (11, 8),
        (12, 9),
        (100, 24),
        (455, 30),
        (919, 30),
        (920, 31),
        (921, 32),
        (5000, 32),
    ])
    def test_known_values(self, total_units, expected):
        """Sample sizes match the regulatory table."""
        assert sample_size(total_units) == expected

    def test_non_positive_and_missing_counts(self):
        """Zero, negative and missing unit counts need no sample."""
        assert sample_size(-3) == 0
        assert sample_size(None) == 0

    def test_monotonic_non_decreasing(self):
        """A bigger property never needs a smaller sample."""
        sizes = [sample_size(n) for n in range(0, 1500)]
        assert sizes == sorted(sizes)

    def test_every_threshold_returns_its_sample(self):
        """Each threshold maps exactly to its tabled sample."""
        for threshold, sample in UNIT_SAMPLE_TABLE:
            assert sample_size(threshold) == sample

    def test_table_covers_one_through_thirty_one(self):
        """The tabled samples run from 1 to 31, then cap at 32."""
        samples = [sample for _, sample in UNIT_SAMPLE_TABLE]
        assert samples[0] == 1
        assert samples[-1] == 31
        assert set(samples) == set(range(1, 32))
        assert MAX_SAMPLE_SIZE == 32

    def test_sample_never_exceeds_units(self):
        """Sample is never larger than the property."""
        for n in range(1, 1000):
            assert sample_size(n) <= n
