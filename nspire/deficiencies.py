"""Static NSPIRE deficiency catalog.

Each entry links a deficiency id to its category, wording, severity, repair
timeframe and voucher rating. The table is built once at import and exposed
read-only.

Severity and timeframe values follow the NSPIRE Standards; severe items
that carry a separate voucher timeframe allow 30 days under HCV/PBV.
"""

import logging
from types import MappingProxyType
from typing import Mapping

from .schemas import Deficiency, DeficiencyCategory, Severity, VoucherResult
from .transformations import normalize_severity

logger = logging.getLogger(__name__)

LT = Severity.LIFE_THREATENING
SEVERE = Severity.SEVERE
MODERATE = Severity.MODERATE
LOW = Severity.LOW

# (id, severity, repair_due_hours, hcv_repair_due_hours, description)
_CATALOG_ROWS = {
    DeficiencyCategory.FIRE_LIFE_SAFETY: [
        ("call_for_aid_blocked", LT, 24, None, "Call-for-aid pull cord is blocked"),
        ("call_for_aid_high", LT, 24, None, "Pull cord end is higher than 6 inches from the floor"),
        ("smoke_alarm_missing", LT, 24, None, "Smoke alarm not installed where required"),
        ("smoke_alarm_obstructed", LT, 24, None, "Smoke alarm is obstructed"),
        ("carbon_monoxide_missing", LT, 24, None, "Carbon monoxide alarm is missing, not installed, or not installed in a proper location"),
        ("sprinkler_obstruction", LT, 24, None, "Obstruction within 18in. of sprinkler head assembly"),
        ("fire_extinguisher_expired", LT, 24, None, "Fire extinguisher service tag is missing, illegible, or expired"),
        ("exit_sign_damaged", LT, 24, None, "Exit sign is damaged, missing, obstructed, or not adequately illuminated"),
    ],
    DeficiencyCategory.BATHROOM: [
        ("bathroom_exhaust_inoperable", MODERATE, 720, None, "Bathroom ventilation system is inoperable"),
        ("bathroom_cabinet_damaged", MODERATE, 720, None, "50%+ of cabinet components are missing/damaged/inoperable in a bathroom or laundry"),
        ("sink_damaged", MODERATE, 720, None, "Sink or sink component is damaged or missing (affects functionality)"),
        ("toilet_missing", LT, 24, None, "Toilet is missing (only toilet in unit)"),
        ("toilet_damaged", SEVERE, 24, None, "Toilet is damaged or inoperable (only toilet in unit)"),
        ("tub_shower_inoperable", SEVERE, 24, 720, "Bath/shower inoperable or not draining (only bath in unit)"),
        ("grab_bar_loose", MODERATE, 720, None, "Any movement whatsoever is detected in the grab bar"),
    ],
    DeficiencyCategory.KITCHEN: [
        ("cabinet_missing", MODERATE, 720, None, "More than 50% of cabinet components are missing, damaged, or inoperable"),
        ("countertop_damaged", MODERATE, 720, None, "10%+ or more of the Countertop is damaged or has exposed substrate"),
        ("food_prep_area_missing", MODERATE, 720, None, "Food preparation area is not present"),
        ("kitchen_sink_missing", MODERATE, 720, None, "Sink is missing or not installed within the primary kitchen"),
        ("refrigerator_missing", MODERATE, 720, None, "Refrigerator is missing"),
        ("refrigerator_inoperable", MODERATE, 720, None, "Refrigerator is inoperable"),
        ("cooking_device_missing", MODERATE, 720, None, "Primary cooking appliance is missing"),
        ("range_not_heating", SEVERE, 24, 720, "No burner on the cooking range or cooktop produces heat"),
    ],
    DeficiencyCategory.FINISHES: [
        ("floor_exposed_substrate", MODERATE, 720, None, "10% or more of the floor substrate area is exposed in any room"),
        ("ceiling_unstable", MODERATE, 720, None, "Ceiling has an unstable surface"),
        ("ceiling_hole", MODERATE, 720, None, "Ceiling has a hole 2in. or more in diameter"),
        ("wall_hole", MODERATE, 720, None, "Interior wall has hole greater than 2in"),
        ("stair_tread_missing", MODERATE, 720, None, "Tread on a set of stairs is missing"),
        ("guardrail_missing", LT, 24, None, "Guardrail is missing on an elevated (30in. or more) walking surface"),
        ("handrail_missing", MODERATE, 720, None, "Handrail is missing (Evidence of Prior Installation)"),
    ],
    DeficiencyCategory.ELECTRICAL: [
        ("exposed_electrical", LT, 24, None, "Exposed electrical conductor"),
        ("water_electrical_contact", LT, 24, None, "Water is currently in contact with an electrical conductor"),
        ("outlet_damaged", LT, 24, None, "Outlet or switch is damaged"),
        ("gfci_missing", SEVERE, 24, 720, "Missing GFCI protection on outlet within Six Feet of water source"),
        ("service_panel_obstructed", MODERATE, 720, None, "Electric service panel is obstructed and not readily accessible"),
        ("min_outlets_missing", MODERATE, 720, None, "Habitable rooms missing 2+ Outlets or 1 Outlet/1 Light Fixture"),
        ("exterior_light_missing", MODERATE, 720, None, "A permanently installed light fixture is missing"),
        ("interior_light_missing", MODERATE, 720, None, "A kitchen or bathroom is missing a permanently installed light fixture"),
    ],
    DeficiencyCategory.WINDOWS_DOORS: [
        ("window_not_open", MODERATE, 720, None, "A unit window will not open or stay open"),
        ("window_not_lock", MODERATE, 720, None, "A unit window cannot be secured/locked"),
        ("window_not_close", SEVERE, 24, 720, "A unit window will not close"),
        ("garage_door_hole", MODERATE, 720, None, "Garage door has a hole that penetrates to the interior"),
        ("entry_door_not_close", SEVERE, 24, 720, "A Unit Entry door will not close"),
        ("entry_door_not_lock", SEVERE, 24, 720, "A Unit Entry door cannot be secured/locked"),
        ("entry_door_hole", MODERATE, 720, None, "1⁄4 inch or greater penetrative hole in door surface"),
        ("entry_door_missing", LT, 24, None, "Entry door is missing"),
        ("fire_door_missing", LT, 24, None, "Fire-labeled door is missing (evidence of prior installation)"),
    ],
    DeficiencyCategory.MECHANICAL: [
        ("elevator_inoperable", MODERATE, 720, None, "Elevator is inoperable"),
        ("gas_leak", LT, 24, None, "Natural gas, propane, or oil leak"),
        ("plumbing_leak", MODERATE, 720, None, "Plumbing leaks"),
        ("sewage_leak", SEVERE, 24, 720, "Leak in the sewage system"),
        ("water_heater_missing_discharge", MODERATE, 720, None, "Pressure relief valve discharge piping is missing"),
        ("water_heater_flue_issue", LT, 24, None, "Chimney or flue piping is blocked, misaligned, missing, or has a negative downward slope"),
        ("dryer_duct_detached", LT, 24, None, "Electric dryer transition duct is detached or missing"),
        ("hvac_inoperable_cold", LT, 24, None, "HVAC system is damaged/inoperable/missing (interior temp less than 64 degrees)"),
    ],
    DeficiencyCategory.HAZARDS: [
        ("blocked_egress", LT, 24, None, "Obstructed means of egress in a Common Area"),
        ("sharp_edge", SEVERE, 24, 720, "Any item or component has a sharp edge that can puncture or cut"),
        ("infestation_roaches", MODERATE, 720, None, "Evidence of cockroaches (One Live Roach or Evidence of Infestation)"),
        ("infestation_bedbugs", MODERATE, 720, None, "Evidence of bedbugs"),
        ("tripping_hazard", MODERATE, 720, None, "Tripping hazard – 3/4\" vertical difference"),
        ("flammables_near_source", LT, 24, None, "Combustible/Flammables material is on or within 3 feet of an HVAC appliance"),
        ("lead_paint_large", SEVERE, 24, 720, "On a large interior surface on a pre-1978 building, MORE than 2 S.F. of paint has deteriorated"),
        ("mold_extensive", LT, 24, None, "Moisture damage on a surface more than 9 S.F. (Units)"),
        ("litter_common_area", MODERATE, 720, None, "Ten or more discarded items or pieces of litter in a 100 S.F. area in the Common Areas"),
    ],
    DeficiencyCategory.SITE_GROUNDS: [
        ("address_signage", MODERATE, 720, None, "Address, signage, or building identification codes are broken, illegible, or not visible"),
        ("fence_hole", MODERATE, 720, None, "Hole in Security Fence Larger than 20% of a Section"),
        ("retaining_wall_leaning", MODERATE, 720, None, "Retaining wall is leaning away from the fill side"),
        ("parking_pothole", MODERATE, 720, None, "Any one pothole is greater than 4\" deep and 1 SF in area"),
        ("road_blocked", SEVERE, 24, 720, "Road or driveway access to the property is blocked or impassable"),
        ("walkway_blocked", MODERATE, 720, None, "Sidewalk, walkway, or ramp is blocked or impassable"),
        ("drain_grate_missing", MODERATE, 720, None, "Grate is not secure or does not cover the site drain opening"),
    ],
    DeficiencyCategory.STRUCTURAL: [
        ("structural_failure", LT, 24, None, "Any load-bearing device, wall, or ceiling that exhibits signs of structural failure"),
        ("roof_ponding", MODERATE, 720, None, "25 SF +/- ponding water above/around a roof drain"),
        ("roof_substrate_exposed", MODERATE, 720, None, "Any amount of roofing substrate is exposed"),
        ("fire_escape_damage", LT, 24, None, "Any stair, ladder, platform, guardrail, or handrail is damaged"),
        ("exterior_wall_missing", MODERATE, 720, None, "Exterior wall with missing section greater than 12×12\""),
        ("foundation_crack", MODERATE, 720, None, "Crack is present with a width of 1⁄4-inch or greater and a length of 12\" or greater"),
        ("chimney_damage", LT, 24, None, "Wood burning fireplace/appliance chimney is damaged"),
    ],
}


def _build_catalog() -> Mapping[str, Deficiency]:
    catalog = {}
    for category, rows in _CATALOG_ROWS.items():
        for deficiency_id, severity, due_hours, hcv_due_hours, description in rows:
            if deficiency_id in catalog:
                raise ValueError(f"Duplicate deficiency id in catalog: {deficiency_id}")
            catalog[deficiency_id] = Deficiency(
                id=deficiency_id,
                category=category,
                description=description,
                severity=severity,
                repair_due_hours=due_hours,
                hcv_repair_due_hours=hcv_due_hours,
                voucher_rating=VoucherResult.PASS if severity == LOW else VoucherResult.FAIL,
            )
    return MappingProxyType(catalog)


NSPIRE_DEFICIENCIES: Mapping[str, Deficiency] = _build_catalog()

# Deficiencies on the HOTMA life-threatening list
HOTMA_DEFICIENCY_IDS = (
    "call_for_aid_blocked",
    "call_for_aid_high",
    "carbon_monoxide_missing",
    "chimney_damage",
    "dryer_duct_detached",
    "entry_door_missing",
    "blocked_egress",
    "exposed_electrical",
    "water_electrical_contact",
    "outlet_damaged",
    "exit_sign_damaged",
    "fire_escape_damage",
    "fire_extinguisher_expired",
    "flammables_near_source",
    "guardrail_missing",
    "hvac_inoperable_cold",
    "gas_leak",
    "mold_extensive",
    "smoke_alarm_missing",
    "smoke_alarm_obstructed",
    "sprinkler_obstruction",
    "structural_failure",
    "toilet_missing",
    "water_heater_flue_issue",
)

# Used when a finding has no catalog link to pick a severity from
CATEGORY_DEFAULT_SEVERITY = {
    DeficiencyCategory.FIRE_LIFE_SAFETY: Severity.LIFE_THREATENING,
    DeficiencyCategory.BUILDING_SYSTEMS: Severity.SEVERE,
    DeficiencyCategory.ELECTRICAL: Severity.SEVERE,
}


def get_deficiency(deficiency_id: str | None) -> Deficiency | None:
    """Look up a deficiency by id. Returns None if not in the catalog."""
    if not deficiency_id:
        return None
    return NSPIRE_DEFICIENCIES.get(deficiency_id)


def get_deficiencies_by_category(category: DeficiencyCategory | str) -> list[Deficiency]:
    """All catalog deficiencies in a category, in catalog order."""
    try:
        category = DeficiencyCategory(category)
    except ValueError:
        return []
    return [d for d in NSPIRE_DEFICIENCIES.values() if d.category == category]


def get_deficiencies_by_severity(severity) -> list[Deficiency]:
    """All catalog deficiencies at a severity. Unknown severities mean moderate."""
    severity = normalize_severity(severity)
    return [d for d in NSPIRE_DEFICIENCIES.values() if d.severity == severity]


def get_hotma_deficiencies() -> list[Deficiency]:
    """HOTMA life-threatening deficiencies present in the catalog."""
    return [
        NSPIRE_DEFICIENCIES[deficiency_id]
        for deficiency_id in HOTMA_DEFICIENCY_IDS
        if deficiency_id in NSPIRE_DEFICIENCIES
    ]


def suggest_severity(category, deficiency_id: str | None = None) -> Severity:
    """Severity to pre-fill for a new finding.

    A linked catalog deficiency wins; otherwise fall back to the category
    default, which is moderate for most categories.
    """
    deficiency = get_deficiency(deficiency_id)
    if deficiency is not None:
        return deficiency.severity
    try:
        category = DeficiencyCategory(category)
    except ValueError:
        logger.debug("No severity default for category %r", category)
        return Severity.MODERATE
    return CATEGORY_DEFAULT_SEVERITY.get(category, Severity.MODERATE)
