"""Inspection report summaries.

Builds the data behind a pre-inspection report: score, voucher outcome,
finding counts and the repair schedule. Rendering (PDF, HTML) is the
caller's job; everything here is plain serializable data.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, Field

from .models import Area, Finding, Inspection
from .schemas import InspectionStatus, ScoreResult, Severity, VoucherResult, utcnow
from .scoring import requires_full_survey
from .severity import SEVERITY_PROFILES

logger = logging.getLogger(__name__)

CATEGORY_NAMES = {
    "site": "Site",
    "buildingExterior": "Building Exterior",
    "buildingSystems": "Building Systems",
    "commonAreas": "Common Areas",
    "unit": "Unit",
    "fire_life_safety": "Fire & Life Safety",
    "bathroom": "Bathroom/Laundry",
    "kitchen": "Kitchen",
    "finishes": "Finishes & Railings",
    "electrical": "Electrical & Lighting",
    "windows_doors": "Windows & Doors",
    "mechanical": "Mechanical",
    "hazards": "Hazards",
    "site_grounds": "Site & Grounds",
    "structural": "Structural",
}


def category_name(category: str | None) -> str:
    return CATEGORY_NAMES.get(category or "", "Other")


class ReportFinding(BaseModel):
    """A finding as listed in the report."""

    id: str
    area_name: str | None = None
    category: str | None = None
    category_name: str
    subcategory: str | None = None
    location: str = ""
    description: str = ""
    severity: Severity
    severity_label: str
    notes: str = ""
    photo_count: int = 0
    photo_urls: list[str] = Field(default_factory=list)


class AreaSummary(BaseModel):
    id: str
    name: str
    area_type: str
    finding_count: int
    worst_severity: Severity | None = None
    severity_class: str


class RepairItem(BaseModel):
    """One line of the repair schedule."""

    finding_id: str
    description: str
    severity: Severity
    timeframe: str
    due_date: datetime


class InspectionReport(BaseModel):
    """Summary of a scored inspection, ready for rendering or sharing."""

    title: str
    generated_at: datetime
    inspection_id: str | None = None
    property_id: str
    inspection_date: datetime
    inspector: str = ""
    status: InspectionStatus

    result: ScoreResult
    voucher_result: VoucherResult
    requires_full_survey: bool

    total_findings: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_severity: dict[Severity, int] = Field(default_factory=dict)
    by_area: dict[str, int] = Field(default_factory=dict)

    areas: list[AreaSummary] = Field(default_factory=list)
    findings: list[ReportFinding] = Field(default_factory=list)
    repair_schedule: list[RepairItem] = Field(default_factory=list)


def _report_finding(finding: Finding, area: Area | None) -> ReportFinding:
    return ReportFinding(
        id=finding.id,
        area_name=area.name if area else None,
        category=finding.category,
        category_name=category_name(finding.category),
        subcategory=finding.subcategory,
        location=finding.location,
        description=finding.description or finding.deficiency,
        severity=finding.severity,
        severity_label=SEVERITY_PROFILES[finding.severity].label,
        notes=finding.notes,
        photo_count=len(finding.photos),
        photo_urls=[photo.url for photo in finding.photos if photo.url],
    )


def _area_summary(area: Area) -> AreaSummary:
    return AreaSummary(
        id=area.id,
        name=area.name,
        area_type=area.area_type.value,
        finding_count=len(area.findings),
        worst_severity=area.worst_severity(),
        severity_class=area.severity_class(),
    )


def build_report(
    inspection: Inspection,
    property_name: str | None = None,
    generated_at: datetime | None = None,
) -> InspectionReport:
    """Summarize an inspection.

    The score is computed fresh from the current findings rather than read
    from the cached score_details, so a stale cache never reaches a report.
    """
    result = inspection.calculate_score()
    program = inspection.program

    located: list[tuple[Finding, Area | None]] = [(f, None) for f in inspection.findings]
    for area in inspection.areas:
        located.extend((f, area) for f in area.findings)

    by_category: dict[str, int] = {}
    by_severity = {severity: 0 for severity in Severity}
    by_area: dict[str, int] = {}
    schedule = []
    for finding, _ in located:
        category = finding.category or "other"
        by_category[category] = by_category.get(category, 0) + 1
        by_severity[finding.severity] += 1
        area_key = finding.area.value if finding.area else "unscored"
        by_area[area_key] = by_area.get(area_key, 0) + 1
        schedule.append(RepairItem(
            finding_id=finding.id,
            description=finding.description or finding.deficiency,
            severity=finding.severity,
            timeframe=SEVERITY_PROFILES[finding.severity].timeframe_label(program),
            due_date=finding.calculate_repair_due_date(program, inspection.date),
        ))

    if by_area.get("unscored"):
        logger.warning(
            "Inspection %s has %d findings without a scoring area",
            inspection.id, by_area["unscored"],
        )

    name = property_name or inspection.property_id
    return InspectionReport(
        title=f"NSPIRE Pre-Inspection Report: {name}",
        generated_at=generated_at or utcnow(),
        inspection_id=inspection.id,
        property_id=inspection.property_id,
        inspection_date=inspection.date,
        inspector=inspection.inspector,
        status=inspection.status,
        result=result,
        voucher_result=inspection.get_voucher_result(),
        requires_full_survey=requires_full_survey(result.score),
        total_findings=len(located),
        by_category=by_category,
        by_severity=by_severity,
        by_area=by_area,
        areas=[_area_summary(area) for area in inspection.areas],
        findings=[_report_finding(f, area) for f, area in located],
        repair_schedule=sorted(schedule, key=lambda item: item.due_date),
    )
