"""NSPIRE scoring engine.

Scoring rules:
- Deductions are weighted per (area, severity) and divided by the unit sample
- Unit deductions above 30 points cap the score at 59 (failing unit rule)
- Scores strictly between 59 and 60 round down to 59; all others round half up
- The score maps to an inspection cycle of 3, 2, 1 or 0 years

The engine is pure: no caching, no I/O, never raises on malformed findings.
"""

import logging
import math
from collections.abc import Iterable, Mapping

from .schemas import PointsDeducted, ScoreResult, ScoringArea, Severity
from .severity import SEVERITY_POINTS
from .transformations import normalize_severity

logger = logging.getLogger(__name__)

PASSING_SCORE = 60
FAILING_UNIT_THRESHOLD = 30.0
FAILING_UNIT_CAP = 59


def _field(finding, name: str):
    if isinstance(finding, Mapping):
        return finding.get(name)
    return getattr(finding, name, None)


def _scoring_area(value) -> ScoringArea | None:
    """Exact bucket match only; translation belongs upstream."""
    if isinstance(value, ScoringArea):
        return value
    try:
        return ScoringArea(value)
    except (TypeError, ValueError):
        return None


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def get_inspection_cycle(score: int | float) -> int:
    """Years until the next inspection for a score; 0 means failing."""
    if score >= 90:
        return 3
    if score >= 80:
        return 2
    if score >= PASSING_SCORE:
        return 1
    return 0


def calculate_nspire_score(findings: Iterable, unit_sample: int | None) -> ScoreResult:
    """Score a set of findings against the sampled unit count.

    Args:
        findings: Findings (or finding mappings) exposing `area` and `severity`.
            Findings outside the three scoring areas are skipped.
        unit_sample: Number of units sampled, not total units. Zero or
            missing is treated as 1.

    Returns:
        ScoreResult with the rounded score, per-area deductions, the failing
        unit flag and the inspection cycle.
    """
    divisor = unit_sample if unit_sample and unit_sample > 0 else 1

    counts = {area: {severity: 0 for severity in Severity} for area in ScoringArea}
    skipped = 0
    for finding in findings:
        area = _scoring_area(_field(finding, "area"))
        if area is None:
            skipped += 1
            continue
        counts[area][normalize_severity(_field(finding, "severity"))] += 1

    if skipped:
        logger.debug("Skipped %d findings without a scoring area", skipped)

    deducted = {area: 0.0 for area in ScoringArea}
    total = 0.0
    for area, by_severity in counts.items():
        for severity, count in by_severity.items():
            if count > 0:
                points = SEVERITY_POINTS[severity][area] * count / divisor
                deducted[area] += points
                total += points

    failing_unit = deducted[ScoringArea.UNITS] > FAILING_UNIT_THRESHOLD

    raw_score = 100 - total
    if failing_unit:
        raw_score = min(raw_score, FAILING_UNIT_CAP)

    # 60 is the minimum passing score, so 59.x never rounds up into it
    if FAILING_UNIT_CAP < raw_score < PASSING_SCORE:
        score = FAILING_UNIT_CAP
    else:
        score = _round_half_up(raw_score)

    return ScoreResult(
        score=score,
        points_deducted=PointsDeducted(
            outside=deducted[ScoringArea.OUTSIDE],
            inside=deducted[ScoringArea.INSIDE],
            units=deducted[ScoringArea.UNITS],
            total=total,
        ),
        failing_unit_adjustment=failing_unit,
        inspection_cycle=get_inspection_cycle(score),
    )


def requires_full_survey(score: int | float) -> bool:
    """A failing score requires a full post-inspection survey."""
    return score < PASSING_SCORE
