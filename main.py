"""
Event Sales Dashboard — End-to-end rollup pipeline.

Runs the rollup and aggregation pipeline from raw exports (or simulated rows
when no exports are present) to dashboard-ready outputs and prints smoke-test
summaries.

Usage:
    python main.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from event_sales_dashboard.config import (
    CATEGORY_REGISTRY,
    EVENTS_JSON_FILE,
    PERFORMANCES_JSON_FILE,
    STAFF_PERFORMANCES_JSON_FILE,
    STAFF_SHEET_FILE,
)
from event_sales_dashboard.loaders import load_event_exports, load_staff_daily_sheet
from event_sales_dashboard.simulator import generate_events
from event_sales_dashboard.rollup import rollup_events, rollup_event
from event_sales_dashboard.aggregate import staff_ranking
from event_sales_dashboard.dashboard import (
    events_to_frame,
    get_analytics_overview,
    get_available_months,
)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the full rollup pipeline and print smoke-test outputs."""

    print("=" * 70)
    print("  EVENT SALES DASHBOARD — Rollup Engine")
    print("  Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source rows
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE ROWS")
    print("-" * 40)

    exports = (EVENTS_JSON_FILE, PERFORMANCES_JSON_FILE, STAFF_PERFORMANCES_JSON_FILE)
    if all(p.exists() for p in exports):
        events, performances, staff_rows = load_event_exports(*exports)
        print("\nSource: JSON exports")
    else:
        logger.warning("Exports not found under %s, using simulated rows", EVENTS_JSON_FILE.parent)
        events, performances, staff_rows = generate_events()
        print("\nSource: simulator")

    if STAFF_SHEET_FILE.exists():
        sheet_rows = load_staff_daily_sheet(str(STAFF_SHEET_FILE)).to_dict("records")
        staff_rows = staff_rows + sheet_rows
        print(f"Workbook rows appended: {len(sheet_rows)}")

    print(f"Events: {len(events)} | Performance rows: {len(performances)} | Staff daily rows: {len(staff_rows)}")

    # ------------------------------------------------------------------
    # 2. Roll up events
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] ROLLING UP EVENTS")
    print("-" * 40)

    summaries = rollup_events(events, performances, staff_rows)
    table = events_to_frame(summaries)
    if not table.empty:
        cols = ["event_id", "venue", "team", "date", "include_cell_up",
                "target_headline", "actual_headline", "achievement"]
        print(table[cols].head(12).to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Analytics outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] ANALYTICS OUTPUTS")
    print("-" * 40)

    print(f"\nAvailable months: {get_available_months(summaries)}")
    overview = get_analytics_overview(summaries)

    print("\nVenue stats (sales):")
    for row in overview["venue_stats"]:
        print(f"  {row['key']:24s} | total {row['total']:5d} | events {row['count']:3d} | avg {row['average']:.1f}")

    print("\nTeam stats (sales):")
    for row in overview["team_stats"]:
        print(f"  {row['key']:24s} | total {row['total']:5d} | events {row['count']:3d} | avg {row['average']:.1f}")

    print("\nMonthly achievement:")
    for row in overview["monthly_achievement"]:
        print(
            f"  {row['month']} | achieved {row['achieved_count']}/{row['eligible_count']}"
            f" ({row['rate']}%) | MNP ratio {row['mnp_ratio']}%"
        )

    print(f"\nAchievement status: {overview['achievement_status']}")

    print("\nCategory actuals (all events):")
    for category, entry in CATEGORY_REGISTRY.items():
        total = sum(s[f"actual_{category}"] for s in summaries)
        print(f"  {entry['label']:14s} | {total:5d}")

    all_staff = [s for summary in summaries for s in summary["staff"]]
    print("\nTop staff (headline):")
    for row in staff_ranking(all_staff)[:5]:
        print(f"  {row['key']:12s} | {row['total']:4d} over {row['count']} events")

    # ------------------------------------------------------------------
    # 4. Invariant checks
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] INVARIANT CHECKS")
    print("-" * 40)

    # Check 1: staff totals add up to event actuals for every category
    mismatches = 0
    for summary in summaries:
        for category in CATEGORY_REGISTRY:
            staff_sum = sum(s[f"{category}_total"] for s in summary["staff"])
            if staff_sum != summary[f"actual_{category}"]:
                mismatches += 1
    check1 = mismatches == 0
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Staff/event category totals agree ({mismatches} mismatches)")

    # Check 2: headline with cell-up >= headline without
    check2 = True
    perf_by_event = {p.get("event_id"): p for p in performances}
    records_by_event: dict = {}
    for row in staff_rows:
        records_by_event.setdefault(row.get("event_id"), []).append(row)
    for event in events:
        rows = records_by_event.get(event.get("id"), [])
        with_cell_up = rollup_event(perf_by_event.get(event.get("id")), rows, True, event)
        without = rollup_event(perf_by_event.get(event.get("id")), rows, False, event)
        if with_cell_up["actual_headline"] < without["actual_headline"]:
            check2 = False
    print(f"  [{'PASS' if check2 else 'FAIL'}] Headline monotonic in include_cell_up")

    # Check 3: rollup is repeatable
    check3 = rollup_events(events, performances, staff_rows) == summaries
    print(f"  [{'PASS' if check3 else 'FAIL'}] Re-running the rollup gives identical output")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
