"""Pytest configuration and fixtures."""
from datetime import datetime, timezone

import pytest

from nspire.models import Area, Finding, Inspection


@pytest.fixture
def inspection_date() -> datetime:
    """Fixed inspection date for deterministic due dates."""
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_finding():
    """Factory for findings with sensible defaults."""
    def _make(area="units", severity="moderate", **fields):
        return Finding(area=area, severity=severity, **fields)
    return _make


@pytest.fixture
def single_unit_inspection(inspection_date) -> Inspection:
    """Inspection of a one-unit property (unit sample of 1)."""
    return Inspection.create(
        "property-1",
        total_units=1,
        id="inspection-1",
        date=inspection_date,
        inspector="J. Rivera",
    )


@pytest.fixture
def populated_inspection(inspection_date) -> Inspection:
    """Inspection with one unit, one inside and one outside area, each with findings."""
    inspection = Inspection.create(
        "property-2",
        total_units=1,
        id="inspection-2",
        date=inspection_date,
        type="hcv",
    )
    unit = inspection.add_area(Area.create("unit", "101"))
    hallway = inspection.add_area(Area.create("inside", "Hallway", type="hallway"))
    parking = inspection.add_area(Area.create("outside", "Parking", type="parking"))

    inspection.add_finding(
        Finding(severity="severe", category="bathroom", description="Toilet inoperable"),
        area_id=unit.id,
    )
    inspection.add_finding(
        Finding(severity="moderate", category="hazards", description="Tripping hazard"),
        area_id=hallway.id,
    )
    inspection.add_finding(
        Finding(severity="low", category="site_grounds", description="Signage faded"),
        area_id=parking.id,
    )
    return inspection
