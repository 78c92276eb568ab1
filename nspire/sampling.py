"""NSPIRE unit sampling table.

Maps the number of units in a property to the number of units that must be
inspected. The table is the regulatory one and must not be approximated
with a formula.
"""

from bisect import bisect_right

# (minimum total units, required sample), ascending by total units
UNIT_SAMPLE_TABLE = (
    (1, 1),
    (2, 2),
    (3, 3),
    (4, 4),
    (5, 5),
    (6, 6),
    (7, 6),
    (8, 7),
    (9, 7),
    (10, 8),
    (12, 9),
    (14, 10),
    (16, 11),
    (18, 12),
    (21, 13),
    (24, 14),
    (27, 15),
    (30, 16),
    (35, 17),
    (39, 18),
    (45, 19),
    (51, 20),
    (59, 21),
    (67, 22),
    (78, 23),
    (92, 24),
    (110, 25),
    (133, 26),
    (166, 27),
    (214, 28),
    (295, 29),
    (455, 30),
    (920, 31),
)

MAX_TABLE_UNITS = UNIT_SAMPLE_TABLE[-1][0]
MAX_SAMPLE_SIZE = 32

_THRESHOLDS = [threshold for threshold, _ in UNIT_SAMPLE_TABLE]


def sample_size(total_units: int | None) -> int:
    """Required inspected sample for a property with `total_units` units."""
    if not total_units or total_units <= 0:
        return 0
    if total_units > MAX_TABLE_UNITS:
        return MAX_SAMPLE_SIZE
    index = bisect_right(_THRESHOLDS, total_units) - 1
    return UNIT_SAMPLE_TABLE[index][1]
