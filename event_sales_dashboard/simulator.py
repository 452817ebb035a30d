"""
Simulated data generator for the event sales dashboard.

Generates realistic event, target and staff daily rows shaped like the
persistence layer's JSON exports. All values are synthetic.
"""

import numpy as np
import pandas as pd

from .config import CATEGORY_FIELDS, LTV_FIELDS, NARRATIVE_FIELDS

# Seed for reproducibility
_RNG = np.random.default_rng(42)

# ---------------------------------------------------------------------------
# Typical event parameters (realistic ranges)
# ---------------------------------------------------------------------------
_VENUES = [
    "Aeon Mall Makuhari",
    "Ario Kameari",
    "Lalaport Tokyo-Bay",
    "Ito-Yokado Ohi",
    "Costco Kawasaki",
]

_TEAMS = ["Kanto East", "Kanto West", "Tokai"]

_STAFF = [
    "Tanaka", "Suzuki", "Sato", "Takahashi", "Watanabe",
    "Ito", "Yamamoto", "Nakamura", "Kobayashi", "Kato",
]

# Poisson mean per staff per day for each counter prefix
_DAILY_RATES = {
    "au_mnp": 0.6,
    "uq_mnp": 0.5,
    "au_hs": 0.4,
    "uq_hs": 0.5,
    "cell_up": 0.3,
}
_LTV_RATE = 0.35
_NETWORK_RATE = 0.2

_NARRATIVES = {
    "operation_details": "Two booths at the main entrance, staggered breaks",
    "preparation_details": "Flyers and novelty stock checked the day before",
    "promotion_method": "Hand-out of smartphone stands to passers-by",
    "success_case_1": "Family of four switched together after plan comparison",
    "success_case_2": "Student MNP with home-internet bundle",
    "challenges_and_solutions": "Queue at ID check; added a second tablet",
}


def generate_daily_records(
    staff_names: list[str] | None = None,
    days: int = 2,
    rng: np.random.Generator | None = None,
    event_id: str | None = None,
) -> list[dict]:
    """Generate one row per staff member per day with Poisson counters."""
    rng = rng if rng is not None else _RNG
    staff_names = staff_names if staff_names is not None else list(_STAFF[:3])
    rows = []

    for staff_name in staff_names:
        for day in range(1, days + 1):
            row = {"staff_name": staff_name, "day_number": day}
            if event_id is not None:
                row["event_id"] = event_id
            for field in CATEGORY_FIELDS:
                prefix = field.rsplit("_", 1)[0]
                row[field] = int(rng.poisson(_DAILY_RATES[prefix]))
            for field in LTV_FIELDS:
                row[field] = int(rng.poisson(_LTV_RATE))
            row["network_count"] = int(rng.poisson(_NETWORK_RATE))
            rows.append(row)

    return rows


def generate_events(
    start_month: str = "2025-07-01",
    n_months: int = 4,
    events_per_month: int = 6,
    rng: np.random.Generator | None = None,
) -> tuple[list[dict], list[dict], list[dict]]:
    """Generate simulated events with their target rows and staff daily rows.

    Returns
    -------
    (events, performances, staff_performances) as lists of dicts. Roughly one
    event in six has no target, and one in four counts cell-up sales toward
    its headline.
    """
    rng = rng if rng is not None else _RNG
    months = pd.date_range(start_month, periods=n_months, freq="MS")

    events: list[dict] = []
    performances: list[dict] = []
    staff_performances: list[dict] = []

    for month in months:
        for i in range(events_per_month):
            event_id = f"evt-{month.strftime('%Y%m')}-{i + 1:02d}"
            week = int(rng.integers(1, 5))
            start = month + pd.Timedelta(days=(week - 1) * 7 + int(rng.integers(0, 3)))
            days = int(rng.integers(1, 4))
            end = start + pd.Timedelta(days=days - 1)

            events.append({
                "id": event_id,
                "venue": str(rng.choice(_VENUES)),
                "agency_name": str(rng.choice(_TEAMS)),
                "start_date": start.date().isoformat(),
                "end_date": end.date().isoformat(),
                "year": int(month.year),
                "month": int(month.month),
                "week_number": week,
                "include_cellup_in_hs_total": bool(rng.random() < 0.25),
            })

            n_staff = int(rng.integers(2, 5))
            staff = [str(s) for s in rng.choice(_STAFF, size=n_staff, replace=False)]
            records = generate_daily_records(staff, days, rng=rng, event_id=event_id)
            staff_performances.extend(records)

            has_target = rng.random() >= 1 / 6
            expected = n_staff * days * 2
            target_total = int(expected * rng.uniform(0.8, 1.3)) if has_target else 0

            perf = {
                "event_id": event_id,
                "target_hs_total": target_total,
                "target_au_mnp": target_total // 3,
                "target_uq_mnp": target_total // 3,
                "target_au_new": target_total // 6,
                "target_uq_new": target_total // 6,
            }
            for field in NARRATIVE_FIELDS:
                perf[field] = _NARRATIVES[field] if rng.random() < 0.7 else None
            performances.append(perf)

    return events, performances, staff_performances
