"""Authoritative severity metadata.

Every consumer of severity (repair due dates, voucher rating, scoring,
report display) reads from SEVERITY_PROFILES instead of keeping its own
switch statement.
"""

from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType
from typing import Mapping

from .schemas import Program, ScoringArea, Severity
from .transformations import normalize_severity


@dataclass(frozen=True)
class SeverityProfile:
    """Everything the system knows about one severity level."""

    severity: Severity
    label: str
    display_class: str
    points: Mapping[ScoringArea, float]
    standard_timeframe: timedelta
    voucher_timeframe: timedelta
    fails_voucher: bool

    def timeframe(self, program: Program) -> timedelta:
        """Repair window for a program."""
        if program in (Program.HCV, Program.PBV):
            return self.voucher_timeframe
        return self.standard_timeframe

    def timeframe_label(self, program: Program) -> str:
        return _describe(self.timeframe(program))


def _describe(window: timedelta) -> str:
    if window <= timedelta(days=1):
        return f"{int(window.total_seconds() // 3600)} Hours"
    return f"{window.days} Days"


SEVERITY_PROFILES: Mapping[Severity, SeverityProfile] = MappingProxyType({
    Severity.LIFE_THREATENING: SeverityProfile(
        severity=Severity.LIFE_THREATENING,
        label="Life Threatening",
        display_class="critical",
        points=MappingProxyType({
            ScoringArea.OUTSIDE: 49.60,
            ScoringArea.INSIDE: 54.50,
            ScoringArea.UNITS: 60.00,
        }),
        standard_timeframe=timedelta(hours=24),
        voucher_timeframe=timedelta(hours=24),
        fails_voucher=True,
    ),
    Severity.SEVERE: SeverityProfile(
        severity=Severity.SEVERE,
        label="Severe",
        display_class="serious",
        points=MappingProxyType({
            ScoringArea.OUTSIDE: 12.20,
            ScoringArea.INSIDE: 13.40,
            ScoringArea.UNITS: 14.80,
        }),
        standard_timeframe=timedelta(hours=24),
        voucher_timeframe=timedelta(days=30),
        fails_voucher=True,
    ),
    Severity.MODERATE: SeverityProfile(
        severity=Severity.MODERATE,
        label="Moderate",
        display_class="moderate",
        points=MappingProxyType({
            ScoringArea.OUTSIDE: 4.50,
            ScoringArea.INSIDE: 5.00,
            ScoringArea.UNITS: 5.50,
        }),
        standard_timeframe=timedelta(days=30),
        voucher_timeframe=timedelta(days=30),
        # Approximation: the HUD rule depends on the specific deficiency.
        fails_voucher=True,
    ),
    Severity.LOW: SeverityProfile(
        severity=Severity.LOW,
        label="Low",
        display_class="minor",
        points=MappingProxyType({
            ScoringArea.OUTSIDE: 2.00,
            ScoringArea.INSIDE: 2.20,
            ScoringArea.UNITS: 2.40,
        }),
        standard_timeframe=timedelta(days=60),
        voucher_timeframe=timedelta(days=60),
        fails_voucher=False,
    ),
})

# Points deducted per occurrence per sampled unit, keyed [severity][area]
SEVERITY_POINTS: Mapping[Severity, Mapping[ScoringArea, float]] = MappingProxyType(
    {severity: profile.points for severity, profile in SEVERITY_PROFILES.items()}
)


def get_severity_profile(raw) -> SeverityProfile:
    """Profile for a raw severity value; unknown values get the moderate profile."""
    return SEVERITY_PROFILES[normalize_severity(raw)]


def severity_rank(severity: Severity) -> int:
    """0 for the most urgent severity, increasing as urgency drops."""
    return list(Severity).index(severity)
