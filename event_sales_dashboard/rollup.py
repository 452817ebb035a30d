"""
Rollups: normalise raw daily records, then sum them into per-staff and
per-event summaries.

Both rollups compute category and headline figures through
``metrics`` so the staff level and the event level always share one formula.
Summaries are plain dicts ready for JSON serialisation.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from .config import (
    COUNTER_FIELDS,
    LTV_FIELDS,
    NARRATIVE_FIELDS,
    TARGET_FIELDS,
)
from .loaders.utils import (
    normalise_date,
    normalise_row,
    safe_bool,
    safe_text,
)
from .metrics import (
    category_totals,
    group_total,
    headline_total,
    ltv_total,
    percent,
    safe_count,
    total_new_ids,
)

logger = logging.getLogger(__name__)

_KEY_COLUMNS = ["staff_name", "day_number"]


# ---------------------------------------------------------------------------
# Daily record normalisation
# ---------------------------------------------------------------------------
def _staff_key(val: Any) -> str:
    # Exact string identity: no stripping or case folding.
    if val is None:
        return ""
    if isinstance(val, float) and pd.isna(val):
        return ""
    return str(val)


def normalise_daily_records(
    daily_records: pd.DataFrame | Iterable[Mapping[str, Any]] | None,
) -> pd.DataFrame:
    """Coerce raw daily records into a typed DataFrame.

    Parameters
    ----------
    daily_records : DataFrame or iterable of dicts with camelCase or
                    snake_case keys.

    Returns
    -------
    DataFrame with columns staff_name, day_number, every counter in
    COUNTER_FIELDS (int64, missing/malformed -> 0), followed by any extra
    columns the input carried. Input order is preserved.
    """
    if daily_records is None:
        rows: list[dict] = []
    elif isinstance(daily_records, pd.DataFrame):
        rows = daily_records.to_dict("records")
    else:
        rows = [dict(r) for r in daily_records]

    if not rows:
        empty = pd.DataFrame(columns=_KEY_COLUMNS + COUNTER_FIELDS)
        empty["staff_name"] = empty["staff_name"].astype(object)
        return empty.astype({c: "int64" for c in ["day_number"] + COUNTER_FIELDS})

    df = pd.DataFrame([normalise_row(r) for r in rows])

    if "staff_name" not in df.columns:
        df["staff_name"] = ""
    df["staff_name"] = df["staff_name"].map(_staff_key)

    for field in COUNTER_FIELDS:
        if field in df.columns:
            df[field] = df[field].map(safe_count).astype("int64")
        else:
            df[field] = 0

    # Missing day numbers fall back to the position within that staff member's rows
    position = df.groupby("staff_name", sort=False).cumcount() + 1
    if "day_number" in df.columns:
        day = df["day_number"].map(safe_count)
        df["day_number"] = day.where(day > 0, position).astype("int64")
    else:
        df["day_number"] = position.astype("int64")

    extra_cols = [c for c in df.columns if c not in _KEY_COLUMNS + COUNTER_FIELDS]
    df = df[_KEY_COLUMNS + COUNTER_FIELDS + extra_cols].copy()
    if extra_cols:
        extras = df[extra_cols].astype(object)
        df[extra_cols] = extras.where(extras.notna(), None)

    logger.debug("Normalised %d daily records", len(df))
    return df


def _counter_sums(df: pd.DataFrame) -> dict[str, int]:
    if df.empty:
        return {field: 0 for field in COUNTER_FIELDS}
    sums = df[COUNTER_FIELDS].sum()
    return {field: int(sums[field]) for field in COUNTER_FIELDS}


def _derived_totals(totals: Mapping[str, int], include_cell_up: bool) -> dict[str, int]:
    derived = {f"{category}_total": value for category, value in category_totals(totals).items()}
    derived["mnp_total"] = group_total(totals, "mnp")
    derived["new_total"] = group_total(totals, "new")
    derived["headline_total"] = headline_total(totals, include_cell_up)
    derived["total_new_ids"] = total_new_ids(totals)
    derived["ltv_total"] = ltv_total(totals)
    return derived


# ---------------------------------------------------------------------------
# Staff rollup
# ---------------------------------------------------------------------------
def _rollup_staff_frame(df: pd.DataFrame, include_cell_up: bool) -> list[dict]:
    summaries = []
    for staff_name, group in df.groupby("staff_name", sort=False):
        totals = _counter_sums(group)
        summary: dict = {"staff_name": staff_name}
        summary.update(totals)
        summary.update(_derived_totals(totals, include_cell_up))
        summary["day_count"] = len(group)
        summary["daily_records"] = group.to_dict("records")
        summaries.append(summary)
    return summaries


def rollup_staff(
    daily_records: pd.DataFrame | Iterable[Mapping[str, Any]] | None,
    include_cell_up: bool = False,
) -> list[dict]:
    """Group an event's daily records by staff name and sum every counter.

    Staff appear in the order their first record appears. Names are
    compared exactly, so "Tanaka" and "tanaka " are two different people.
    Each summary keeps its contributing records, in input order, under
    ``daily_records``.
    """
    df = normalise_daily_records(daily_records)
    if df.empty:
        logger.warning("No daily records supplied — returning no staff summaries")
        return []

    summaries = _rollup_staff_frame(df, include_cell_up)
    logger.info("Rolled up %d daily records into %d staff summaries", len(df), len(summaries))
    return summaries


# ---------------------------------------------------------------------------
# Event rollup
# ---------------------------------------------------------------------------
def _as_rows(rows: Mapping[str, Any] | Iterable[Mapping[str, Any]] | None) -> list[dict]:
    if rows is None:
        return []
    if isinstance(rows, Mapping):
        return [normalise_row(dict(rows))]
    if isinstance(rows, pd.DataFrame):
        return [normalise_row(r) for r in rows.to_dict("records")]
    return [normalise_row(dict(r)) for r in rows]


def _first_non_empty(rows: Iterable[Mapping[str, Any]], fields: list[str]) -> dict[str, str | None]:
    """First-write-wins: a later non-empty value never replaces an earlier one."""
    found: dict[str, str | None] = {field: None for field in fields}
    for row in rows:
        for field in fields:
            if found[field] is None:
                found[field] = safe_text(row.get(field))
    return found


def _event_id(row: Mapping[str, Any]) -> Any:
    # Falsy ids such as 0 are valid
    event_id = row.get("id")
    return row.get("event_id") if event_id is None else event_id


def _event_metadata(event: Mapping[str, Any] | None) -> dict:
    row = normalise_row(dict(event)) if event else {}

    start = normalise_date(row.get("start_date") or row.get("date"))
    end = normalise_date(row.get("end_date"))

    year = safe_count(row.get("year")) or (start.year if start is not None else 0)
    month = safe_count(row.get("month")) or (start.month if start is not None else 0)
    week = safe_count(row.get("week_number"))

    event_days = 0
    if start is not None and end is not None and end >= start:
        event_days = (end - start).days + 1

    period_display = None
    if year and month:
        period_display = f"{year}-{month:02d}"
        if week:
            period_display += f" W{week}"

    return {
        "event_id": _event_id(row),
        "event_name": safe_text(row.get("name")),
        "venue": safe_text(row.get("venue")),
        "team": safe_text(row.get("team")),
        "date": start.date().isoformat() if start is not None else None,
        "end_date": end.date().isoformat() if end is not None else None,
        "year": year or None,
        "month": month or None,
        "week_number": week or None,
        "period_display": period_display,
        "event_days": event_days,
        "include_cell_up": safe_bool(row.get("include_cell_up")),
    }


def rollup_event(
    target_row: Mapping[str, Any] | Iterable[Mapping[str, Any]] | None,
    daily_records: pd.DataFrame | Iterable[Mapping[str, Any]] | None,
    include_cell_up: bool | None = None,
    event: Mapping[str, Any] | None = None,
) -> dict:
    """Build one event summary from its target row(s) and daily records.

    Parameters
    ----------
    target_row : The event's performance row, a list of them, or None.
                 Targets are summed across rows.
    daily_records : Every staff daily record for the event.
    include_cell_up : Whether cell-up sales count toward the headline total.
                      None falls back to the flag on ``event`` (default False).
    event : Optional event row carrying venue, team and dates.

    Returns
    -------
    EventSummary dict. Actual figures are summed from the full record set;
    the attached staff summaries use the same include_cell_up value.
    """
    meta = _event_metadata(event)
    if include_cell_up is None:
        include_cell_up = meta["include_cell_up"]
    include_cell_up = bool(include_cell_up)
    meta["include_cell_up"] = include_cell_up

    df = normalise_daily_records(daily_records)
    performance_rows = _as_rows(target_row)

    totals = _counter_sums(df)
    targets = {
        key: sum(safe_count(row.get(column)) for row in performance_rows)
        for column, key in TARGET_FIELDS.items()
    }

    narrative_sources = performance_rows + (df.to_dict("records") if not df.empty else [])
    narrative = _first_non_empty(narrative_sources, NARRATIVE_FIELDS)

    summary: dict = dict(meta)
    summary.update(targets)
    for category, value in category_totals(totals).items():
        summary[f"actual_{category}"] = value
    summary["actual_mnp_total"] = group_total(totals, "mnp")
    summary["actual_new_total"] = group_total(totals, "new")
    summary["actual_headline"] = headline_total(totals, include_cell_up)
    summary["total_new_ids"] = total_new_ids(totals)
    for field in LTV_FIELDS:
        summary[field] = totals[field]
    summary["actual_ltv_total"] = ltv_total(totals)
    summary["network_count"] = totals["network_count"]
    summary["achievement_pct"] = percent(summary["actual_headline"], summary["target_headline"])
    summary.update(narrative)

    staff = _rollup_staff_frame(df, include_cell_up) if not df.empty else []
    summary["staff_count"] = len(staff)
    summary["day_record_count"] = len(df)
    summary["staff"] = staff

    logger.info(
        "Rolled up event %s: %d records, %d staff, headline %d (cell-up %s)",
        summary["event_id"],
        len(df),
        len(staff),
        summary["actual_headline"],
        "included" if include_cell_up else "excluded",
    )
    return summary


def rollup_events(
    events: Iterable[Mapping[str, Any]],
    performances: Iterable[Mapping[str, Any]] | None = None,
    daily_records: Iterable[Mapping[str, Any]] | None = None,
) -> list[dict]:
    """Roll up many events at once, joining rows on event id.

    Each event is rolled up with its own include_cell_up flag. Rows whose
    event id matches no event are ignored and logged.
    """
    perf_by_event: dict[Any, list[dict]] = defaultdict(list)
    for row in _as_rows(performances):
        perf_by_event[row.get("event_id")].append(row)

    records_by_event: dict[Any, list[dict]] = defaultdict(list)
    for row in _as_rows(daily_records):
        records_by_event[row.get("event_id")].append(row)

    summaries = []
    seen = set()
    for event in events:
        event_row = normalise_row(dict(event))
        event_id = _event_id(event_row)
        seen.add(event_id)
        summaries.append(
            rollup_event(
                perf_by_event.get(event_id, []),
                records_by_event.get(event_id, []),
                event=event,
            )
        )

    orphaned = sum(len(v) for k, v in records_by_event.items() if k not in seen)
    if orphaned:
        logger.warning("Ignored %d daily records with no matching event", orphaned)

    logger.info("Rolled up %d events", len(summaries))
    return summaries
