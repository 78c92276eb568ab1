"""Pydantic schemas and enumerations for NSPIRE inspection data.

Schema Engineering Philosophy:
- Enum members carry the exact string values stored by the inspection app
- Value types here are leaf records; aggregates live in nspire/models.py
- Normalization of raw input happens in nspire/transformations.py, never inline

References:
- HUD NSPIRE Standards (National Standards for the Physical Inspection of Real Estate)
- NSPIRE Scoring Notice: point values per area and severity
- HOTMA (Housing Opportunity Through Modernization Act) life-threatening list
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


def utcnow() -> datetime:
    """Timezone-aware current time used for record timestamps."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS: Canonical value sets with descriptions
# =============================================================================


class Severity(str, Enum):
    """NSPIRE deficiency severity.

    Drives both the repair deadline and the score deduction. Listed from
    most to least urgent; the order of members is significant.
    """

    LIFE_THREATENING = "lifeThreatening"
    """Life-Threatening (LT). Repair within 24 hours under every program."""

    SEVERE = "severe"
    """Severe. 24 hours for REAC/standard, 30 days for HCV and PBV."""

    MODERATE = "moderate"
    """Moderate. 30 days under every program. Default for unknown input."""

    LOW = "low"
    """Low. 60 days under every program. Passes a voucher inspection."""


class ScoringArea(str, Enum):
    """Scoring bucket over which point deductions are weighted.

    Distinct from AreaType: the scoring engine only understands these three
    values, and AreaType must be converted through
    transformations.to_scoring_area before scoring.
    """

    OUTSIDE = "outside"
    """Site and building exterior."""

    INSIDE = "inside"
    """Common areas and building systems inside the building."""

    UNITS = "units"
    """Dwelling units in the sample."""


class AreaType(str, Enum):
    """Area classification used by the inspection app for navigation."""

    UNIT = "unit"
    """A dwelling unit (e.g. '101')."""

    INSIDE = "inside"
    """An inside common area (hallway, laundry, community room, office)."""

    OUTSIDE = "outside"
    """An outside area (building exterior, parking, grounds, playground)."""


class Program(str, Enum):
    """Repair-timeline program. Only severe deficiencies differ between them."""

    STANDARD = "standard"
    """REAC / public housing / multifamily timeline."""

    HCV = "hcv"
    """Housing Choice Voucher."""

    PBV = "pbv"
    """Project-Based Voucher."""


class InspectionType(str, Enum):
    """Kind of inspection being performed."""

    REAC = "reac"
    """HUD REAC physical inspection."""

    HCV = "hcv"
    """Housing Choice Voucher unit inspection."""

    SELF = "self"
    """Owner self-inspection ahead of a HUD visit."""

    PBV = "pbv"
    """Project-Based Voucher inspection."""

    STANDARD = "standard"
    """Generic NSPIRE inspection."""


class InspectionStatus(str, Enum):
    """Lifecycle of an inspection record."""

    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class FindingStatus(str, Enum):
    """Remediation lifecycle of a finding. Independent of scoring."""

    OPEN = "open"
    """Recorded, no repair scheduled yet."""

    SCHEDULED = "scheduled"
    """Repair work has been scheduled."""

    REPAIRED = "repaired"
    """Repair reported complete by maintenance."""

    VERIFIED = "verified"
    """Repair verified by an inspector."""


class VoucherResult(str, Enum):
    """Pass/fail outcome for voucher (HCV/PBV) programs."""

    PASS = "pass"
    FAIL = "fail"


class DeficiencyCategory(str, Enum):
    """Deficiency categories.

    The first group is the inspectable-item grouping of the deficiency
    catalog; the second is the NSPIRE top-level inspectable area grouping
    used by the app's category pickers.
    """

    FIRE_LIFE_SAFETY = "fire_life_safety"
    BATHROOM = "bathroom"
    KITCHEN = "kitchen"
    FINISHES = "finishes"
    ELECTRICAL = "electrical"
    WINDOWS_DOORS = "windows_doors"
    MECHANICAL = "mechanical"
    HAZARDS = "hazards"
    SITE_GROUNDS = "site_grounds"
    STRUCTURAL = "structural"

    SITE = "site"
    BUILDING_EXTERIOR = "buildingExterior"
    BUILDING_SYSTEMS = "buildingSystems"
    COMMON_AREAS = "commonAreas"
    UNIT = "unit"


# =============================================================================
# VALUE TYPES
# =============================================================================


class Deficiency(BaseModel):
    """Immutable catalog record describing one NSPIRE deficiency."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        min_length=1,
        description="Catalog key, e.g. 'smoke_alarm_missing'."
    )
    category: DeficiencyCategory
    description: str = Field(description="Deficiency wording from the NSPIRE standard.")
    severity: Severity
    repair_due_hours: int = Field(
        gt=0,
        description="Standard repair timeframe in hours (24, 720 or 1440)."
    )
    hcv_repair_due_hours: int | None = Field(
        default=None,
        gt=0,
        description="Voucher-program timeframe in hours when it differs from the standard one."
    )
    voucher_rating: VoucherResult = VoucherResult.FAIL


class Photo(BaseModel):
    """Reference to a stored photo of a finding. The bytes live elsewhere."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    url: str | None = Field(default=None, description="Download URL in object storage.")
    caption: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)


class PointsDeducted(BaseModel):
    """Point deductions per scoring area, normalized by unit sample."""

    outside: float = 0.0
    inside: float = 0.0
    units: float = 0.0
    total: float = 0.0


class ScoreResult(BaseModel):
    """Output of the scoring engine. Cached on the inspection as score_details."""

    score: int = Field(description="Final rounded NSPIRE score; may be negative.")
    points_deducted: PointsDeducted = Field(default_factory=PointsDeducted)
    failing_unit_adjustment: bool = Field(
        default=False,
        description="True when unit deductions exceeded 30 points and capped the score at 59."
    )
    inspection_cycle: int = Field(
        description="Years until the next inspection: 3, 2, 1, or 0 for a failing score."
    )

    @computed_field
    @property
    def passed(self) -> bool:
        """60 is the minimum passing score."""
        return self.score >= 60
