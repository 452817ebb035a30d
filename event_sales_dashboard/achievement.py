"""
Target achievement — per-event classification and monthly rates.

An event is eligible only when it has a positive headline target. Events
without a target are left out of both sides of the achievement rate; they are
not failures.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .aggregate import period_key
from .metrics import percent, safe_count

logger = logging.getLogger(__name__)


def is_eligible(event: Mapping[str, Any]) -> bool:
    return safe_count(event.get("target_headline")) > 0


def is_achieved(event: Mapping[str, Any]) -> bool | None:
    """Return whether actual headline >= target headline.

    None for events with no target.
    """
    if not is_eligible(event):
        return None
    return safe_count(event.get("actual_headline")) >= safe_count(event.get("target_headline"))


def classify_achievement(event: Mapping[str, Any]) -> str:
    """Return 'achieved', 'not_achieved' or 'no_target'."""
    achieved = is_achieved(event)
    if achieved is None:
        return "no_target"
    return "achieved" if achieved else "not_achieved"


def achievement_status(events: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    """Count events by achievement class."""
    counts = {"achieved": 0, "not_achieved": 0, "no_target": 0}
    for event in events:
        counts[classify_achievement(event)] += 1
    return counts


def evaluate_achievement(events: Iterable[Mapping[str, Any]]) -> list[dict]:
    """Summarise achievement by reporting month (see aggregate.period_key).

    Rules
    -----
    - rate: achieved / eligible * 100, rounded half up; 0 with no eligible events
    - mnp_ratio: MNP / (MNP + new-line) * 100 over every event in the month,
      eligible or not; 0 when there were no MNP or new-line sales
    - total_target / total_actual: headline sums over eligible events only

    Returns
    -------
    List of dicts in ascending month order:
    {
        "month": "2025-07",
        "event_count": 3,
        "eligible_count": 2,
        "achieved_count": 1,
        "rate": 50,
        "total_target": 30,
        "total_actual": 27,
        "total_mnp": 20,
        "total_new": 12,
        "mnp_ratio": 63,
    }
    """
    months: dict[str, dict] = {}
    skipped = 0

    for event in events:
        key = period_key(event)
        if key is None:
            skipped += 1
            continue

        stats = months.setdefault(key, {
            "month": key,
            "event_count": 0,
            "eligible_count": 0,
            "achieved_count": 0,
            "total_target": 0,
            "total_actual": 0,
            "total_mnp": 0,
            "total_new": 0,
        })
        stats["event_count"] += 1
        stats["total_mnp"] += safe_count(event.get("actual_mnp_total"))
        stats["total_new"] += safe_count(event.get("actual_new_total"))

        if is_eligible(event):
            stats["eligible_count"] += 1
            stats["total_target"] += safe_count(event.get("target_headline"))
            stats["total_actual"] += safe_count(event.get("actual_headline"))
            if is_achieved(event):
                stats["achieved_count"] += 1

    if skipped:
        logger.warning("Skipped %d events with no reporting month for achievement", skipped)

    result = []
    for key in sorted(months):
        stats = months[key]
        stats["rate"] = percent(stats["achieved_count"], stats["eligible_count"])
        stats["mnp_ratio"] = percent(stats["total_mnp"], stats["total_mnp"] + stats["total_new"])
        result.append(stats)

    logger.info("Evaluated achievement for %d months", len(result))
    return result
