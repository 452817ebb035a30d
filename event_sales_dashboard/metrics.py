"""
Metric category registry operations — pure functions with no side effects.

The only place category, headline and LTV formulas are defined. Staff and
event rollups both call through here so the two levels cannot disagree.
"""

import logging
import math
import numbers
from collections.abc import Mapping
from typing import Any

from .config import (
    CATEGORY_GROUPS,
    CATEGORY_FIELDS,
    CATEGORY_REGISTRY,
    LTV_FIELDS,
)

logger = logging.getLogger(__name__)

# Counters are stored as int64 once normalised
_COUNTER_MIN = -(2**63)
_COUNTER_MAX = 2**63 - 1


class CategoryConfigError(LookupError):
    """Raised when a category, group or scalar name is not in the registry."""


def safe_count(val: Any) -> int:
    """Coerce a value to a non-null integer counter.

    None, blanks, NaN, non-numeric strings, non-integral numbers and values
    outside the int64 range all become 0. Integers are returned exactly.
    """
    if val is None or isinstance(val, bool):
        return int(val or 0)
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return 0
        try:
            val = int(val)
        except ValueError:
            pass

    if isinstance(val, numbers.Integral):
        count = int(val)
    else:
        try:
            f = float(val)
        except (ValueError, TypeError):
            logger.debug("Non-numeric counter value %r treated as 0", val)
            return 0
        if math.isnan(f) or math.isinf(f):
            return 0
        if not f.is_integer():
            logger.debug("Non-integral counter value %r treated as 0", val)
            return 0
        count = int(f)

    if not _COUNTER_MIN <= count <= _COUNTER_MAX:
        logger.debug("Out-of-range counter value %r treated as 0", val)
        return 0
    return count


def field_value(record: Mapping[str, Any], field: str) -> int:
    """Return a counter from a record, treating absent or malformed values as 0."""
    return safe_count(record.get(field))


def category_fields(category: str) -> tuple[str, ...]:
    """Return the sub-channel fields for a category.

    Raises CategoryConfigError for unknown categories.
    """
    try:
        return CATEGORY_REGISTRY[category]["fields"]
    except KeyError:
        raise CategoryConfigError(f"Unknown metric category: {category!r}") from None


def category_total(record: Mapping[str, Any], category: str) -> int:
    """Sum the three sub-channel counters of one category."""
    return sum(field_value(record, field) for field in category_fields(category))


def category_totals(record: Mapping[str, Any]) -> dict[str, int]:
    """Return {category: total} for every registered category."""
    return {category: category_total(record, category) for category in CATEGORY_REGISTRY}


def group_total(record: Mapping[str, Any], group: str) -> int:
    """Sum every category in a headline group ("mnp", "new" or "cell_up")."""
    if group not in CATEGORY_GROUPS:
        raise CategoryConfigError(f"Unknown category group: {group!r}")
    return sum(category_total(record, category) for category in CATEGORY_GROUPS[group])


def mnp_total(record: Mapping[str, Any]) -> int:
    return group_total(record, "mnp")


def new_line_total(record: Mapping[str, Any]) -> int:
    return group_total(record, "new")


def cell_up_total(record: Mapping[str, Any]) -> int:
    return group_total(record, "cell_up")


def headline_total(record: Mapping[str, Any], include_cell_up: bool) -> int:
    """Return the headline sign-up total used for target comparison.

    MNP and new-line sales always count; cell-up sales count only when the
    event's include_cell_up flag is set.
    """
    total = mnp_total(record) + new_line_total(record)
    if include_cell_up:
        total += cell_up_total(record)
    return total


def total_new_ids(record: Mapping[str, Any]) -> int:
    """All category counters, cell-up included, irrespective of any flag."""
    return sum(field_value(record, field) for field in CATEGORY_FIELDS)


def ltv_total(record: Mapping[str, Any]) -> int:
    """Sum of the ancillary LTV product counters."""
    return sum(field_value(record, field) for field in LTV_FIELDS)


def percent(numerator: float, denominator: float) -> int:
    """Return numerator / denominator as a half-up rounded integer percentage.

    A non-positive denominator yields 0.
    """
    if not denominator or denominator <= 0:
        return 0
    return int(math.floor(numerator / denominator * 100 + 0.5))


def safe_average(total: float, count: int) -> float:
    """total / count, or 0 when count is zero."""
    if count <= 0:
        return 0
    return total / count
