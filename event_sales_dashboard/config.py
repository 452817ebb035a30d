"""
Configuration: metric category registry, field lists, constants.

CATEGORY_REGISTRY maps each sales category to its display label, the group it
rolls up into, and the three sub-channel counter fields that compose it.
Every category formula in the package reads from this registry.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths — adjust these if source exports move
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

EVENTS_JSON_FILE = DATA_DIR / "exports" / "events.json"
PERFORMANCES_JSON_FILE = DATA_DIR / "exports" / "performances.json"
STAFF_PERFORMANCES_JSON_FILE = DATA_DIR / "exports" / "staff_performances.json"
STAFF_SHEET_FILE = DATA_DIR / "exports" / "staff_daily_entry.xlsx"

# ---------------------------------------------------------------------------
# Sub-channels
# ---------------------------------------------------------------------------
# sp1 / sp2: sales-plan tiers, sim: SIM-only
SUB_CHANNELS = ("sp1", "sp2", "sim")

# ---------------------------------------------------------------------------
# Metric category registry
# ---------------------------------------------------------------------------
# group: "mnp", "new" or "cell_up" (headline composition)
# prefix: raw counter prefix; new-line counters are stored as "*_hs_*"
# label: display label
CATEGORY_REGISTRY: dict[str, dict] = {
    "au_mnp": {
        "group": "mnp",
        "prefix": "au_mnp",
        "label": "au MNP",
    },
    "uq_mnp": {
        "group": "mnp",
        "prefix": "uq_mnp",
        "label": "UQ MNP",
    },
    "au_new": {
        "group": "new",
        "prefix": "au_hs",
        "label": "au new line",
    },
    "uq_new": {
        "group": "new",
        "prefix": "uq_hs",
        "label": "UQ new line",
    },
    "cell_up": {
        "group": "cell_up",
        "prefix": "cell_up",
        "label": "Cell-up",
    },
}

for _entry in CATEGORY_REGISTRY.values():
    _entry["fields"] = tuple(f"{_entry['prefix']}_{sub}" for sub in SUB_CHANNELS)

CATEGORY_GROUPS: dict[str, tuple[str, ...]] = {
    group: tuple(c for c, e in CATEGORY_REGISTRY.items() if e["group"] == group)
    for group in ("mnp", "new", "cell_up")
}

CATEGORY_FIELDS: list[str] = [
    field for entry in CATEGORY_REGISTRY.values() for field in entry["fields"]
]

# Ancillary cross-sell products, tracked outside the headline total
LTV_FIELDS: list[str] = [
    "credit_card",
    "gold_card",
    "ji_bank_account",
    "warranty",
    "ott",
    "electricity",
    "gas",
]

OTHER_COUNTER_FIELDS: list[str] = ["network_count"]

COUNTER_FIELDS: list[str] = CATEGORY_FIELDS + LTV_FIELDS + OTHER_COUNTER_FIELDS

# ---------------------------------------------------------------------------
# Performance (target) row
# ---------------------------------------------------------------------------
# target column -> EventSummary key
TARGET_FIELDS: dict[str, str] = {
    "target_hs_total": "target_headline",
    "target_au_mnp": "target_au_mnp",
    "target_uq_mnp": "target_uq_mnp",
    "target_au_new": "target_au_new",
    "target_uq_new": "target_uq_new",
}

NARRATIVE_FIELDS: list[str] = [
    "operation_details",
    "preparation_details",
    "promotion_method",
    "success_case_1",
    "success_case_2",
    "challenges_and_solutions",
]

# Raw key aliases left over after camelCase -> snake_case conversion
FIELD_ALIASES: dict[str, str] = {
    "success_case1": "success_case_1",
    "success_case2": "success_case_2",
    "agency_name": "team",
    "include_cellup_in_hs_total": "include_cell_up",
    "day_index": "day_number",
    "day": "day_number",
}

# ---------------------------------------------------------------------------
# Cross-event scalars
# ---------------------------------------------------------------------------
# name -> EventSummary keys summed to produce the scalar
SCALAR_FIELDS: dict[str, tuple[str, ...]] = {
    "headline": ("actual_headline",),
    "sales": ("total_new_ids", "actual_ltv_total"),
    "mnp": ("actual_mnp_total",),
    "new": ("actual_new_total",),
    "hs": ("actual_mnp_total", "actual_new_total"),
    "cell_up": ("actual_cell_up",),
    "ltv": ("actual_ltv_total",),
    "au_mnp": ("actual_au_mnp",),
    "uq_mnp": ("actual_uq_mnp",),
    "au_new": ("actual_au_new",),
    "uq_new": ("actual_uq_new",),
}

# Headline bands for the performance-level distribution (inclusive upper bound)
PERFORMANCE_LEVELS: list[tuple[str, int | None]] = [
    ("low (0-5)", 5),
    ("standard (6-15)", 15),
    ("good (16-25)", 25),
    ("excellent (26-35)", 35),
    ("outstanding (36+)", None),
]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
MONTH_KEY_FORMAT = "%Y-%m"
EXCEL_EPOCH = "1899-12-30"
