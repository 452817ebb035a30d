"""
Cross-event aggregation — pure functions with no side effects.

Groups event summaries by venue, team or calendar month and produces ranked
totals, counts and averages, plus the distribution and trend tables the
analytics views chart.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import pandas as pd

from .config import MONTH_KEY_FORMAT, PERFORMANCE_LEVELS, SCALAR_FIELDS
from .loaders.utils import normalise_date
from .metrics import CategoryConfigError, safe_average, safe_count

logger = logging.getLogger(__name__)


def scalar_value(event: Mapping[str, Any], name: str) -> int:
    """Resolve a named scalar (see config.SCALAR_FIELDS) from an event summary."""
    try:
        fields = SCALAR_FIELDS[name]
    except KeyError:
        raise CategoryConfigError(f"Unknown scalar: {name!r}") from None
    return sum(safe_count(event.get(field)) for field in fields)


def scalar_getter(name: str) -> Callable[[Mapping[str, Any]], int]:
    """Return a value function for aggregate_by_key.

    The name is validated up front so a typo fails even on an empty list.
    """
    if name not in SCALAR_FIELDS:
        raise CategoryConfigError(f"Unknown scalar: {name!r}")
    return lambda event: scalar_value(event, name)


def _year_month(event: Mapping[str, Any]) -> str | None:
    year = safe_count(event.get("year"))
    month = safe_count(event.get("month"))
    if year and 1 <= month <= 12:
        return f"{year:04d}-{month:02d}"
    return None


def _date_month(event: Mapping[str, Any]) -> str | None:
    ts = normalise_date(event.get("date"))
    return ts.strftime(MONTH_KEY_FORMAT) if ts is not None else None


def month_key(event: Mapping[str, Any]) -> str | None:
    """Return the calendar month the event started in, as "YYYY-MM".

    Falls back to the year/month fields for undated events.
    """
    return _date_month(event) or _year_month(event)


def period_key(event: Mapping[str, Any]) -> str | None:
    """Return the event's reporting month, as "YYYY-MM".

    The reporting period (year, month, week_number) is entered separately
    from the event dates, so an event starting on 30 June can be reported
    as July. Falls back to the start date when year/month are missing.
    """
    return _year_month(event) or _date_month(event)


def aggregate_by_key(
    events: Iterable[Mapping[str, Any]],
    key_fn: Callable[[Mapping[str, Any]], Any],
    value_fn: Callable[[Mapping[str, Any]], float],
    order: str = "total",
) -> list[dict]:
    """Group events by key and return total, count and average per group.

    Parameters
    ----------
    events : Event summaries (already filtered by the caller).
    key_fn : Returns the group key for an event. Events whose key is None
             or empty are skipped.
    value_fn : Returns the scalar summed for an event.
    order : "total" sorts descending by total (ties keep first-seen order),
            "key" sorts ascending by key.

    Returns
    -------
    List of {"key", "total", "count", "average"} dicts.
    """
    if order not in ("total", "key"):
        raise ValueError(f"order must be 'total' or 'key', got {order!r}")

    rows = []
    skipped = 0
    for event in events:
        key = key_fn(event)
        if key is None or key == "":
            skipped += 1
            continue
        rows.append({"key": key, "value": value_fn(event)})

    if skipped:
        logger.debug("Skipped %d events with no group key", skipped)
    if not rows:
        return []

    df = pd.DataFrame(rows)
    grouped = (
        df.groupby("key", sort=False)["value"]
        .agg(total="sum", count="size")
        .reset_index()
    )

    if order == "total":
        grouped = grouped.sort_values("total", ascending=False, kind="stable")
    else:
        grouped = grouped.sort_values("key", kind="stable")

    result = []
    for row in grouped.to_dict("records"):
        total = row["total"]
        count = int(row["count"])
        result.append({
            "key": row["key"],
            "total": total,
            "count": count,
            "average": safe_average(total, count),
        })
    return result


def venue_stats(events: Iterable[Mapping[str, Any]], value: str = "sales") -> list[dict]:
    """Per-venue totals, highest total first."""
    stats = aggregate_by_key(events, lambda e: e.get("venue"), scalar_getter(value))
    logger.info("Built venue stats for %d venues", len(stats))
    return stats


def team_stats(events: Iterable[Mapping[str, Any]], value: str = "sales") -> list[dict]:
    """Per-team totals, highest total first."""
    stats = aggregate_by_key(events, lambda e: e.get("team"), scalar_getter(value))
    logger.info("Built team stats for %d teams", len(stats))
    return stats


def monthly_trends(events: Iterable[Mapping[str, Any]], value: str = "sales") -> list[dict]:
    """Per-month totals in chronological order."""
    stats = aggregate_by_key(events, month_key, scalar_getter(value), order="key")
    logger.info("Built monthly trends for %d months", len(stats))
    return stats


def staff_ranking(
    staff_summaries: Iterable[Mapping[str, Any]],
    value: str = "headline_total",
) -> list[dict]:
    """Rank staff across events by a StaffSummary field, highest first.

    Staff are matched by exact name, so the same caveat as the staff rollup
    applies: distinct people sharing a name are merged.
    """
    return aggregate_by_key(
        staff_summaries,
        lambda s: s.get("staff_name"),
        lambda s: safe_count(s.get(value)),
    )


def performance_levels(events: Iterable[Mapping[str, Any]]) -> list[dict]:
    """Count events per headline band (see config.PERFORMANCE_LEVELS)."""
    counts = {label: 0 for label, _ in PERFORMANCE_LEVELS}
    for event in events:
        headline = safe_count(event.get("actual_headline"))
        for label, upper in PERFORMANCE_LEVELS:
            if upper is None or headline <= upper:
                counts[label] += 1
                break
    return [{"level": label, "count": count} for label, count in counts.items()]


def weekly_stats(events: Iterable[Mapping[str, Any]]) -> list[dict]:
    """MNP / new-line totals per event week, in chronological order.

    Weeks are keyed on the event's reporting year, month and week number;
    events without a week number fall into week 1.
    """
    rows = []
    for event in events:
        month = period_key(event)
        if month is None:
            continue
        week = safe_count(event.get("week_number")) or 1
        mnp = scalar_value(event, "mnp")
        new = scalar_value(event, "new")
        rows.append({
            "sort_key": f"{month}-{week:02d}",
            "year_month": month,
            "week_number": week,
            "mnp": mnp,
            "new": new,
            "total": mnp + new,
        })

    if not rows:
        return []

    df = pd.DataFrame(rows)
    weekly = (
        df.groupby(["sort_key", "year_month", "week_number"], sort=True)
        .agg(mnp=("mnp", "sum"), new=("new", "sum"), total=("total", "sum"), count=("total", "size"))
        .reset_index()
    )
    return [
        {
            "sort_key": r["sort_key"],
            "year_month": r["year_month"],
            "week_number": int(r["week_number"]),
            "mnp": int(r["mnp"]),
            "new": int(r["new"]),
            "total": int(r["total"]),
            "count": int(r["count"]),
        }
        for r in weekly.to_dict("records")
    ]


def venue_monthly_trend(events: Iterable[Mapping[str, Any]], value: str = "hs") -> pd.DataFrame:
    """Month x venue pivot of a scalar; months with no events at a venue are 0."""
    get_value = scalar_getter(value)
    rows = []
    for event in events:
        month = month_key(event)
        venue = event.get("venue")
        if month is None or not venue:
            continue
        rows.append({"month": month, "venue": venue, "value": get_value(event)})

    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows)
    pivot = df.pivot_table(
        index="month",
        columns="venue",
        values="value",
        aggfunc="sum",
        fill_value=0,
    ).sort_index()
    pivot.columns.name = None
    return pivot.reset_index()
