"""Tests for the Inspection aggregate."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from nspire.models import Area, Finding, Inspection
from nspire.schemas import InspectionStatus, Program, ScoringArea, Severity, VoucherResult


class TestInspectionCreation:
    """Tests for creating and loading inspections."""

    def test_create_derives_unit_sample(self):
        """unit_sample comes from the sampling table at creation."""
        inspection = Inspection.create("property-1", total_units=10)
        assert inspection.unit_sample == 8
        assert inspection.status == InspectionStatus.IN_PROGRESS
        assert inspection.score is None

    def test_unit_sample_not_recomputed_on_change(self):
        """Changing total_units leaves the sample alone until resample()."""
        inspection = Inspection.create("property-1", total_units=10)
        inspection.total_units = 100
        assert inspection.unit_sample == 8
        assert inspection.resample() == 24
        assert inspection.score == 100

    def test_loading_keeps_stored_sample(self):
        """Loading a stored record never re-derives the sample."""
        inspection = Inspection(property_id="property-1", total_units=50, unit_sample=3)
        assert inspection.unit_sample == 3

    def test_create_rejects_explicit_sample(self):
        """create() owns the sample; stored samples go through the constructor."""
        with pytest.raises(TypeError, match="derived from total_units"):
            Inspection.create("property-1", total_units=10, unit_sample=3)

    def test_negative_units_rejected(self):
        """Unit counts cannot be negative."""
        with pytest.raises(ValidationError):
            Inspection.create("property-1", total_units=-1)

    @pytest.mark.parametrize("raw, expected", [
        ("Scheduled", InspectionStatus.SCHEDULED),
        ("In Progress", InspectionStatus.IN_PROGRESS),
        ("InProgress", InspectionStatus.IN_PROGRESS),
        ("completed", InspectionStatus.COMPLETED),
    ])
    def test_status_normalized(self, raw, expected):
        """Stored status spellings are normalized."""
        assert Inspection(property_id="p", status=raw).status == expected

    def test_program_from_type(self):
        """Voucher inspection types use voucher repair timelines."""
        assert Inspection(property_id="p", type="hcv").program == Program.HCV
        assert Inspection(property_id="p", type="pbv").program == Program.PBV
        assert Inspection(property_id="p", type="reac").program == Program.STANDARD
        assert Inspection(property_id="p", type="self").program == Program.STANDARD


class TestInspectionScoring:
    """Tests for score calculation and caching."""

    def test_empty_inspection(self, single_unit_inspection):
        """No findings means a perfect score and a voucher pass."""
        result = single_unit_inspection.calculate_score()
        assert result.score == 100
        assert result.inspection_cycle == 3
        assert single_unit_inspection.get_voucher_result() == VoucherResult.PASS
        assert single_unit_inspection.requires_full_survey() is False

    def test_add_finding_recalculates(self, single_unit_inspection):
        """Adding a finding refreshes score and score_details."""
        unit = single_unit_inspection.add_area(Area.create("unit", "101"))
        single_unit_inspection.add_finding(Finding(severity="lifeThreatening"), area_id=unit.id)

        assert single_unit_inspection.score == 40
        details = single_unit_inspection.score_details
        assert details.failing_unit_adjustment is True
        assert details.points_deducted.units == pytest.approx(60.0)
        assert single_unit_inspection.requires_full_survey() is True

    def test_update_finding_recalculates(self, single_unit_inspection):
        """Editing severity rescores the inspection."""
        unit = single_unit_inspection.add_area(Area.create("unit", "101"))
        finding = single_unit_inspection.add_finding(
            Finding(severity="lifeThreatening"), area_id=unit.id
        )

        updated = single_unit_inspection.update_finding(finding.id, severity="low", notes="Re-rated")
        assert updated.severity == Severity.LOW
        assert updated.notes == "Re-rated"
        assert updated.area == ScoringArea.UNITS
        assert single_unit_inspection.get_finding(finding.id) is updated
        assert single_unit_inspection.score == 98

    def test_update_finding_normalizes_input(self, single_unit_inspection):
        """Updates go through the same normalization as new findings."""
        finding = single_unit_inspection.add_finding({"area": "outside", "severity": "low"})
        updated = single_unit_inspection.update_finding(finding.id, severity="bogus")
        assert updated.severity == Severity.MODERATE
        assert single_unit_inspection.score == 96

    def test_remove_finding_recalculates(self, single_unit_inspection):
        """Removing the only finding restores a perfect score."""
        finding = single_unit_inspection.add_finding(Finding(area="inside", severity="severe"))
        assert single_unit_inspection.score == 87

        removed = single_unit_inspection.remove_finding(finding.id)
        assert removed.id == finding.id
        assert single_unit_inspection.score == 100
        assert single_unit_inspection.all_findings() == []

    def test_remove_area_recalculates(self, populated_inspection):
        """Removing an area drops its findings from the score."""
        unit = next(a for a in populated_inspection.areas if a.area_type == "unit")
        populated_inspection.remove_area(unit.id)
        assert populated_inspection.score == 93

    def test_unknown_ids_raise_key_error(self, single_unit_inspection):
        """Unknown area and finding ids raise KeyError."""
        with pytest.raises(KeyError):
            single_unit_inspection.add_finding(Finding(), area_id="missing")
        with pytest.raises(KeyError):
            single_unit_inspection.update_finding("missing", severity="low")
        with pytest.raises(KeyError):
            single_unit_inspection.remove_finding("missing")
        with pytest.raises(KeyError):
            single_unit_inspection.remove_area("missing")

    def test_inspection_level_findings_are_normalized_and_scored(self, single_unit_inspection):
        """Findings stored with the app's 'unit' area are scored as units."""
        finding = single_unit_inspection.add_finding({"area": "unit", "severity": "moderate"})
        assert finding.area == ScoringArea.UNITS
        assert finding.inspection_id == "inspection-1"
        assert single_unit_inspection.score == 95

    def test_all_findings_flattens_areas(self, populated_inspection):
        """Scoring sees findings from every area."""
        assert len(populated_inspection.all_findings()) == 3
        result = populated_inspection.calculate_score()
        assert result.points_deducted.units == pytest.approx(14.8)
        assert result.points_deducted.inside == pytest.approx(5.0)
        assert result.points_deducted.outside == pytest.approx(2.0)
        assert result.score == 78
        assert result.inspection_cycle == 1
        assert populated_inspection.score == 78

    def test_zero_sample_scores_as_one(self):
        """An inspection without a sample still scores."""
        inspection = Inspection(property_id="p", findings=[{"area": "outside", "severity": "low"}])
        assert inspection.unit_sample == 0
        assert inspection.calculate_score().score == 98

    def test_calculate_score_does_not_touch_cache(self):
        """calculate_score is pure; recalculate stores the result."""
        inspection = Inspection(property_id="p", findings=[{"area": "outside", "severity": "low"}])
        inspection.calculate_score()
        assert inspection.score is None
        inspection.recalculate()
        assert inspection.score == 98
        assert inspection.score_details.score == 98

    def test_requires_full_survey_scores_on_demand(self):
        """An unscored inspection is evaluated from its findings."""
        inspection = Inspection(
            property_id="p",
            unit_sample=1,
            findings=[{"area": "units", "severity": "lifeThreatening"}],
        )
        assert inspection.requires_full_survey() is True
        assert inspection.score is None


    def test_loaded_area_findings_scored(self):
        """Findings stored inside an area are scored in that area's bucket."""
        inspection = Inspection(
            property_id="p",
            unit_sample=1,
            areas=[{
                "id": "unit-1",
                "name": "101",
                "area_type": "unit",
                "findings": [{"severity": "lifeThreatening"}],
            }],
        )
        result = inspection.calculate_score()
        assert result.points_deducted.units == pytest.approx(60.0)
        assert result.score == 40
        assert inspection.all_findings()[0].area == ScoringArea.UNITS

    def test_area_findings_appended_directly_are_scored(self, single_unit_inspection):
        """The area's type decides the bucket even when a finding bypasses add_finding."""
        area = single_unit_inspection.add_area(Area.create("outside", "Parking"))
        area.findings.append(Finding(area="units", severity="low"))
        result = single_unit_inspection.calculate_score()
        assert result.points_deducted.outside == pytest.approx(2.0)
        assert result.points_deducted.units == 0
        assert result.score == 98


class TestVoucherResult:
    """Tests for Inspection.get_voucher_result()."""

    def test_low_findings_pass(self, single_unit_inspection):
        """Only low findings pass."""
        single_unit_inspection.add_finding(Finding(area="units", severity="low"))
        assert single_unit_inspection.get_voucher_result() == VoucherResult.PASS

    def test_any_failing_finding_fails(self, single_unit_inspection):
        """One moderate finding fails the inspection."""
        single_unit_inspection.add_finding(Finding(area="units", severity="low"))
        single_unit_inspection.add_finding(Finding(area="inside", severity="moderate"))
        assert single_unit_inspection.get_voucher_result() == VoucherResult.FAIL


class TestRepairSchedule:
    """Tests for Inspection.apply_repair_schedule()."""

    def test_uses_inspection_date_and_program(self, populated_inspection):
        """HCV inspections give severe findings 30 days."""
        populated_inspection.apply_repair_schedule()
        due = {f.severity: f.repair_due_date for f in populated_inspection.all_findings()}
        assert due[Severity.SEVERE] == datetime(2025, 1, 31, tzinfo=timezone.utc)
        assert due[Severity.MODERATE] == datetime(2025, 1, 31, tzinfo=timezone.utc)
        assert due[Severity.LOW] == datetime(2025, 3, 2, tzinfo=timezone.utc)

    def test_round_trip_preserves_derived_fields(self, populated_inspection):
        """A dumped and reloaded inspection keeps its cached score."""
        populated_inspection.apply_repair_schedule()
        reloaded = Inspection.model_validate(populated_inspection.model_dump())
        assert reloaded.score == populated_inspection.score
        assert reloaded.unit_sample == populated_inspection.unit_sample
        assert reloaded.calculate_score() == populated_inspection.calculate_score()
