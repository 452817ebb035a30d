"""
Dashboard-ready output functions.

These are the primary entry points for an API or reporting layer.
Each function returns plain dicts or DataFrames suitable for JSON responses,
cards, charts and tables. Nothing is cached: every call recomputes from the
rows it is given.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from .achievement import achievement_status, classify_achievement, evaluate_achievement
from .aggregate import (
    monthly_trends,
    performance_levels,
    period_key,
    team_stats,
    venue_stats,
    weekly_stats,
)
from .rollup import rollup_event

logger = logging.getLogger(__name__)


def get_event_detail(
    event: Mapping[str, Any],
    performance_rows: Iterable[Mapping[str, Any]] | Mapping[str, Any] | None,
    daily_records: Iterable[Mapping[str, Any]] | None,
) -> dict:
    """Single entry point for an event detail view.

    Rolls the event up from its raw rows using the include_cell_up flag stored
    on the event, and adds the achievement class.
    """
    summary = rollup_event(performance_rows, daily_records, event=event)
    summary["achievement"] = classify_achievement(summary)
    return summary


def get_analytics_overview(
    event_summaries: list[dict],
    value: str = "sales",
) -> dict:
    """Cross-event analytics for a filtered set of event summaries.

    Parameters
    ----------
    event_summaries : Output of rollup_event / rollup_events, already
                      filtered by period, venue or team.
    value : Scalar used for venue, team and monthly totals
            (see config.SCALAR_FIELDS).

    Returns
    -------
    Dict with structure:
    {
        "event_count": 12,
        "venue_stats": [{"key": ..., "total": ..., "count": ..., "average": ...}, ...],
        "team_stats": [...],
        "monthly_trends": [...],
        "weekly_stats": [...],
        "monthly_achievement": [{"month": ..., "rate": ..., "mnp_ratio": ...}, ...],
        "achievement_status": {"achieved": ..., "not_achieved": ..., "no_target": ...},
        "performance_levels": [{"level": ..., "count": ...}, ...],
    }
    """
    if not event_summaries:
        logger.warning("No events supplied — returning empty analytics overview")

    return {
        "event_count": len(event_summaries),
        "venue_stats": venue_stats(event_summaries, value),
        "team_stats": team_stats(event_summaries, value),
        "monthly_trends": monthly_trends(event_summaries, value),
        "weekly_stats": weekly_stats(event_summaries),
        "monthly_achievement": evaluate_achievement(event_summaries),
        "achievement_status": achievement_status(event_summaries),
        "performance_levels": performance_levels(event_summaries),
    }


def get_available_months(event_summaries: Iterable[Mapping[str, Any]]) -> list[str]:
    """Return sorted list of "YYYY-MM" reporting months for UI dropdowns."""
    months = {period_key(e) for e in event_summaries}
    months.discard(None)
    return sorted(months)


def events_to_frame(event_summaries: list[dict]) -> pd.DataFrame:
    """Flatten event summaries into one row per event for tabular display.

    Nested staff lists are dropped; an achievement column is added.
    """
    if not event_summaries:
        return pd.DataFrame()

    rows = []
    for summary in event_summaries:
        row = {k: v for k, v in summary.items() if k != "staff"}
        row["achievement"] = classify_achievement(summary)
        rows.append(row)

    df = pd.DataFrame(rows)
    df["period_key"] = [period_key(s) for s in event_summaries]
    return df
