"""Boundary normalization for raw inspection records.

Records written by the inspection app (and older versions of it) carry
loosely-typed strings. Every conversion into the canonical enums happens
here, exactly once, before data reaches the scoring engine.

Normalization Philosophy:
- Never reject a record for a bad severity; fall back to MODERATE
- Never guess a scoring area; unknown areas become None and are logged
- Each map is the single source for its conversion
"""

import logging
import re

from .schemas import AreaType, InspectionStatus, InspectionType, Program, ScoringArea, Severity

logger = logging.getLogger(__name__)


def _key(raw: str) -> str:
    """Collapse case, spaces, dashes and underscores for lookup."""
    return re.sub(r"[\s_\-]+", "", raw.strip().lower())


# =============================================================================
# Severity Normalization
# =============================================================================

# Keys are _key()-collapsed spellings seen in stored records
SEVERITY_MAP = {
    "lifethreatening": Severity.LIFE_THREATENING,
    "lt": Severity.LIFE_THREATENING,
    "critical": Severity.LIFE_THREATENING,
    "severe": Severity.SEVERE,
    "serious": Severity.SEVERE,
    "moderate": Severity.MODERATE,
    "low": Severity.LOW,
    "minor": Severity.LOW,
}

# Legacy numeric levels: 1 = Minor, 2 = Major, 3 = Severe/Life-Threatening
LEGACY_SEVERITY_LEVELS = {
    1: Severity.LOW,
    2: Severity.MODERATE,
    3: Severity.SEVERE,
}


def parse_severity(raw) -> Severity | None:
    """Map a raw severity to the enum, or None when unrecognized."""
    if isinstance(raw, Severity):
        return raw
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return LEGACY_SEVERITY_LEVELS.get(raw)
    if isinstance(raw, str) and raw.strip():
        return SEVERITY_MAP.get(_key(raw))
    return None


def normalize_severity(raw) -> Severity:
    """Map a raw severity to the enum; unknown or missing means MODERATE."""
    severity = parse_severity(raw)
    if severity is None:
        if raw not in (None, ""):
            logger.warning("Unrecognized severity %r, treating as moderate", raw)
        return Severity.MODERATE
    return severity


# =============================================================================
# Area Normalization
# =============================================================================

# AreaType (navigation) -> ScoringArea (engine)
AREA_TYPE_TO_SCORING = {
    AreaType.UNIT: ScoringArea.UNITS,
    AreaType.INSIDE: ScoringArea.INSIDE,
    AreaType.OUTSIDE: ScoringArea.OUTSIDE,
}

SCORING_AREA_ALIASES = {
    "unit": ScoringArea.UNITS,
    "units": ScoringArea.UNITS,
    "inside": ScoringArea.INSIDE,
    "outside": ScoringArea.OUTSIDE,
}


def to_scoring_area(raw) -> ScoringArea | None:
    """Convert an AreaType or raw area string into its scoring bucket.

    This is the only place 'unit' becomes 'units'.
    """
    if raw is None:
        return None
    if isinstance(raw, ScoringArea):
        return raw
    if isinstance(raw, AreaType):
        return AREA_TYPE_TO_SCORING[raw]
    if isinstance(raw, str):
        area = SCORING_AREA_ALIASES.get(raw.strip().lower())
        if area is not None:
            return area
    logger.warning("Area %r does not map to a scoring area; finding will not be scored", raw)
    return None


# =============================================================================
# Program / Type / Status Normalization
# =============================================================================

INSPECTION_TYPE_TO_PROGRAM = {
    InspectionType.HCV: Program.HCV,
    InspectionType.PBV: Program.PBV,
    InspectionType.REAC: Program.STANDARD,
    InspectionType.SELF: Program.STANDARD,
    InspectionType.STANDARD: Program.STANDARD,
}


def to_program(raw) -> Program:
    """Resolve a repair program from a Program, InspectionType or string.

    Anything that is not a voucher program uses the standard timeline.
    """
    if isinstance(raw, Program):
        return raw
    if isinstance(raw, InspectionType):
        return INSPECTION_TYPE_TO_PROGRAM[raw]
    if isinstance(raw, str):
        clean = raw.strip().lower()
        if clean in (Program.HCV.value, Program.PBV.value):
            return Program(clean)
    return Program.STANDARD


# 'InProgress' and 'in_progress' both appear in older records
INSPECTION_STATUS_MAP = {
    "scheduled": InspectionStatus.SCHEDULED,
    "inprogress": InspectionStatus.IN_PROGRESS,
    "completed": InspectionStatus.COMPLETED,
    "complete": InspectionStatus.COMPLETED,
}


def normalize_inspection_status(raw) -> InspectionStatus:
    """Normalize stored status strings. Unknown values default to In Progress."""
    if isinstance(raw, InspectionStatus):
        return raw
    if isinstance(raw, str) and raw.strip():
        status = INSPECTION_STATUS_MAP.get(_key(raw))
        if status is not None:
            return status
        logger.warning("Unrecognized inspection status %r, using In Progress", raw)
    return InspectionStatus.IN_PROGRESS
