"""Domain models for NSPIRE inspections.

Data Architecture Overview:
- Inspection is the AGGREGATE ROOT: it owns Areas, which own Findings
- Inspection-level findings (not attached to an area) are also supported
- score / score_details are caches of the last scoring run and are
  recalculated by every mutating method on Inspection

Key Concepts:
- AreaType: WHERE the inspector navigated (unit, inside, outside)
- ScoringArea: WHICH bucket the scoring engine weights (units, inside, outside)
- unit_sample: derived from total_units once, at creation (see Inspection.create)

References:
- See nspire/scoring.py for the scoring rules
- See nspire/severity.py for repair timeframes and voucher rules
"""

import logging
import uuid
from datetime import date, datetime, time, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import DEFAULT_PROGRAM
from .deficiencies import get_deficiency
from .sampling import sample_size
from .schemas import (
    AreaType,
    FindingStatus,
    InspectionStatus,
    InspectionType,
    Photo,
    Program,
    ScoreResult,
    ScoringArea,
    Severity,
    VoucherResult,
    utcnow,
)
from .scoring import calculate_nspire_score, requires_full_survey
from .severity import SEVERITY_PROFILES, severity_rank
from .transformations import (
    normalize_inspection_status,
    normalize_severity,
    to_program,
    to_scoring_area,
)

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime | date | None) -> datetime:
    if moment is None:
        return utcnow()
    if not isinstance(moment, datetime):
        return datetime.combine(moment, time(), tzinfo=timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


# =============================================================================
# FINDING
# =============================================================================


class Finding(BaseModel):
    """One deficiency observed during an inspection.

    Severity and area are normalized on the way in: an unknown severity
    becomes MODERATE, and an area that is not a scoring bucket becomes None
    (the finding is kept but not scored). The same rules apply to later
    assignments such as `finding.severity = "catastrophic"`.
    """

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(default_factory=lambda: f"finding-{uuid.uuid4().hex}")
    inspection_id: str | None = None
    area_id: str | None = None

    area: ScoringArea | None = Field(
        default=None,
        description="Scoring bucket. 'unit' from the app is converted to 'units'."
    )
    category: str | None = None
    subcategory: str | None = None
    deficiency_id: str | None = Field(
        default=None,
        description="Optional link into the deficiency catalog."
    )
    severity: Severity = Severity.MODERATE

    description: str = ""
    deficiency: str = Field(default="", description="Free-text deficiency as typed by the inspector.")
    location: str = ""
    notes: str = ""
    photos: list[Photo] = Field(default_factory=list)

    repair_due_date: datetime | None = Field(
        default=None,
        description="Derived by apply_repair_schedule; not authoritative input."
    )
    repair_timeframe: str | None = None
    hcv_rating: VoucherResult | None = None
    status: FindingStatus = FindingStatus.OPEN

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="before")
    @classmethod
    def fill_from_catalog(cls, data):
        """Take severity, category and wording from the linked deficiency when missing."""
        if not isinstance(data, dict) or data.get("severity"):
            return data
        deficiency = get_deficiency(data.get("deficiency_id"))
        if deficiency is None:
            return data
        data = {**data, "severity": deficiency.severity}
        if not data.get("category"):
            data["category"] = deficiency.category.value
        if not data.get("description"):
            data["description"] = deficiency.description
        return data

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v):
        return normalize_severity(v)

    @field_validator("area", mode="before")
    @classmethod
    def normalize_area(cls, v):
        return to_scoring_area(v)

    def touch(self) -> None:
        self.updated_at = utcnow()

    def calculate_repair_due_date(
        self,
        program: Program | InspectionType | str = DEFAULT_PROGRAM,
        inspection_date: datetime | date | None = None,
    ) -> datetime:
        """Repair deadline for this finding.

        Life-threatening: 24 hours. Severe: 30 days for HCV/PBV, otherwise
        24 hours. Moderate: 30 days. Low: 60 days.
        """
        profile = SEVERITY_PROFILES[self.severity]
        return _as_utc(inspection_date) + profile.timeframe(to_program(program))

    def is_fail_for_voucher(self) -> bool:
        """True if this finding fails a voucher (HCV/PBV) inspection.

        Moderate findings fail by default. The HUD rule for moderate
        deficiencies depends on the specific deficiency, which is not encoded.
        """
        return SEVERITY_PROFILES[self.severity].fails_voucher

    def voucher_result(self) -> VoucherResult:
        return VoucherResult.FAIL if self.is_fail_for_voucher() else VoucherResult.PASS

    def apply_repair_schedule(
        self,
        program: Program | InspectionType | str = DEFAULT_PROGRAM,
        inspection_date: datetime | date | None = None,
    ) -> None:
        """Fill the derived repair_due_date, repair_timeframe and hcv_rating fields."""
        program = to_program(program)
        self.repair_due_date = self.calculate_repair_due_date(program, inspection_date)
        self.repair_timeframe = SEVERITY_PROFILES[self.severity].timeframe_label(program)
        self.hcv_rating = self.voucher_result()
        self.touch()

    def add_photo(self, photo: Photo | dict) -> Photo:
        if not isinstance(photo, Photo):
            photo = Photo.model_validate(photo)
        self.photos.append(photo)
        self.touch()
        return photo

    def set_status(self, status: FindingStatus | str) -> None:
        self.status = FindingStatus(status)
        self.touch()


def calculate_repair_due_date(
    finding: Finding,
    program: Program | InspectionType | str = DEFAULT_PROGRAM,
    inspection_date: datetime | date | None = None,
) -> datetime:
    """Repair deadline for a finding under a program."""
    return finding.calculate_repair_due_date(program, inspection_date)


def is_fail_for_voucher(finding: Finding) -> bool:
    """True if a finding fails a voucher inspection."""
    return finding.is_fail_for_voucher()


# =============================================================================
# AREA
# =============================================================================


class Area(BaseModel):
    """A named grouping of findings: a unit, an inside area or an outside area."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    name: str = Field(min_length=1, max_length=200)
    area_type: AreaType
    type: str = Field(
        default="",
        description="Quick-add sub-type, e.g. 'hallway', 'parking', or a unit number."
    )
    findings: list[Finding] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def create(cls, area_type: AreaType | str, name: str, type: str = "") -> "Area":
        area_type = AreaType(area_type)
        return cls(
            id=f"{area_type.value}-{uuid.uuid4().hex}",
            name=name,
            area_type=area_type,
            type=type,
        )

    @model_validator(mode="after")
    def claim_findings(self) -> "Area":
        """Loaded findings take this area's id and scoring bucket."""
        for finding in self.findings:
            self._claim(finding)
        return self

    @property
    def scoring_area(self) -> ScoringArea:
        return to_scoring_area(self.area_type)

    def _claim(self, finding: Finding) -> None:
        finding.area_id = self.id
        finding.area = self.scoring_area

    def add_finding(self, finding: Finding) -> Finding:
        """Attach a finding; it takes this area's id and scoring bucket."""
        self._claim(finding)
        self.findings.append(finding)
        return finding

    def worst_severity(self) -> Severity | None:
        """Most urgent severity among this area's findings, or None if empty."""
        if not self.findings:
            return None
        return min((f.severity for f in self.findings), key=severity_rank)

    def severity_class(self) -> str:
        worst = self.worst_severity()
        if worst is None:
            return "minor"
        return SEVERITY_PROFILES[worst].display_class


# =============================================================================
# INSPECTION
# =============================================================================


class Inspection(BaseModel):
    """An NSPIRE inspection of one property.

    Use Inspection.create for new inspections so unit_sample is derived from
    total_units. Loading a stored inspection through the constructor keeps
    the stored unit_sample as-is.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = None
    property_id: str = Field(min_length=1)
    date: datetime = Field(default_factory=utcnow)
    inspector: str = ""
    status: InspectionStatus = InspectionStatus.IN_PROGRESS
    type: InspectionType = InspectionType.REAC

    total_units: int = Field(default=0, ge=0)
    unit_sample: int = Field(
        default=0,
        ge=0,
        description="Units sampled. Not recomputed when total_units changes; see resample()."
    )

    areas: list[Area] = Field(default_factory=list)
    findings: list[Finding] = Field(
        default_factory=list,
        description="Findings recorded against the inspection rather than an area."
    )
    notes: str = ""

    score: int | None = None
    score_details: ScoreResult | None = None

    user_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return normalize_inspection_status(v)

    @classmethod
    def create(cls, property_id: str, total_units: int = 0, **fields) -> "Inspection":
        """Start a new inspection, deriving the unit sample from total_units."""
        if "unit_sample" in fields:
            raise TypeError(
                "unit_sample is derived from total_units; load stored inspections "
                "with the Inspection constructor instead"
            )
        return cls(
            property_id=property_id,
            total_units=total_units,
            unit_sample=sample_size(total_units),
            **fields,
        )

    @property
    def program(self) -> Program:
        return to_program(self.type)

    def resample(self) -> int:
        """Re-derive unit_sample from the current total_units and rescore."""
        self.unit_sample = sample_size(self.total_units)
        self.recalculate()
        return self.unit_sample

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def all_findings(self) -> list[Finding]:
        """Inspection-level findings followed by every area's findings."""
        findings = list(self.findings)
        for area in self.areas:
            findings.extend(area.findings)
        return findings

    def get_area(self, area_id: str) -> Area:
        for area in self.areas:
            if area.id == area_id:
                return area
        raise KeyError(area_id)

    def _locate_finding(self, finding_id: str) -> tuple[list[Finding], int]:
        containers = [self.findings] + [area.findings for area in self.areas]
        for container in containers:
            for index, finding in enumerate(container):
                if finding.id == finding_id:
                    return container, index
        raise KeyError(finding_id)

    def get_finding(self, finding_id: str) -> Finding:
        container, index = self._locate_finding(finding_id)
        return container[index]

    # -------------------------------------------------------------------------
    # Mutations (each one refreshes the cached score)
    # -------------------------------------------------------------------------

    def add_area(self, area: Area) -> Area:
        self.areas.append(area)
        for finding in area.findings:
            finding.inspection_id = self.id
        self.recalculate()
        return area

    def remove_area(self, area_id: str) -> Area:
        area = self.get_area(area_id)
        self.areas.remove(area)
        self.recalculate()
        return area

    def add_finding(self, finding: Finding | dict, area_id: str | None = None) -> Finding:
        """Record a finding, optionally inside an area, and rescore."""
        if not isinstance(finding, Finding):
            finding = Finding.model_validate(finding)
        finding.inspection_id = self.id
        if area_id is not None:
            self.get_area(area_id).add_finding(finding)
        else:
            self.findings.append(finding)
        self.recalculate()
        return finding

    def update_finding(self, finding_id: str, **changes) -> Finding:
        """Apply field changes to a finding (re-validated) and rescore."""
        container, index = self._locate_finding(finding_id)
        data = {**container[index].model_dump(), **changes, "updated_at": utcnow()}
        updated = Finding.model_validate(data)
        container[index] = updated
        self.recalculate()
        return updated

    def remove_finding(self, finding_id: str) -> Finding:
        container, index = self._locate_finding(finding_id)
        finding = container.pop(index)
        self.recalculate()
        return finding

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def calculate_score(self) -> ScoreResult:
        """Score every finding against this inspection's unit sample.

        Area findings are bucketed by their area's type, whatever their own
        `area` field says.
        """
        rows: list = list(self.findings)
        for area in self.areas:
            bucket = area.scoring_area
            rows.extend({"area": bucket, "severity": f.severity} for f in area.findings)
        return calculate_nspire_score(rows, self.unit_sample)

    def recalculate(self) -> ScoreResult:
        """Refresh the cached score and score_details."""
        result = self.calculate_score()
        self.score = result.score
        self.score_details = result
        self.updated_at = utcnow()
        logger.info(
            "Inspection %s scored %d (cycle %d, failing unit: %s)",
            self.id, result.score, result.inspection_cycle, result.failing_unit_adjustment,
        )
        return result

    def get_voucher_result(self) -> VoucherResult:
        """Fail if any finding fails for voucher programs, else pass."""
        for finding in self.all_findings():
            if finding.is_fail_for_voucher():
                return VoucherResult.FAIL
        return VoucherResult.PASS

    def requires_full_survey(self) -> bool:
        """A score below 60 requires a full post-inspection survey."""
        score = self.score if self.score is not None else self.calculate_score().score
        return requires_full_survey(score)

    def apply_repair_schedule(self) -> None:
        """Derive repair due dates for every finding from the inspection date and program."""
        for finding in self.all_findings():
            finding.apply_repair_schedule(self.program, self.date)
