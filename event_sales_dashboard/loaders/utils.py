"""
Shared utilities for data ingestion: key normalisation, value coercion,
date parsing, header detection.
"""

import logging
import math
import re
from typing import Any

import pandas as pd

from ..config import EXCEL_EPOCH, FIELD_ALIASES
from ..metrics import safe_count  # noqa: F401  re-exported for loaders

logger = logging.getLogger(__name__)


def normalise_date(val: Any) -> pd.Timestamp | None:
    """Convert Excel serial number, ISO string or datetime to pd.Timestamp.

    Excel serial numbers use the 1899-12-30 epoch. Returns None for
    unparseable values.
    """
    if val is None or (isinstance(val, str) and not val.strip()):
        return None
    if isinstance(val, pd.Timestamp):
        return None if pd.isna(val) else val
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        if isinstance(val, float) and math.isnan(val):
            return None
        try:
            return pd.Timestamp(EXCEL_EPOCH) + pd.Timedelta(days=int(val))
        except (ValueError, OverflowError):
            logger.warning("Could not convert serial number %s to date", val)
            return None
    try:
        ts = pd.Timestamp(val)
    except (ValueError, TypeError):
        logger.warning("Could not parse date value: %s", val)
        return None
    return None if pd.isna(ts) else ts


def to_snake_case(name: str) -> str:
    """Convert a field name to snake_case.

    Handles camelCase keys from form payloads ("auMnpSp1" -> "au_mnp_sp1")
    as well as spaced or hyphenated spreadsheet headers.
    """
    s = str(name).strip()
    s = s.replace("-", "_").replace(".", "_")
    s = re.sub(r"[^a-zA-Z0-9]+", "_", s)
    # CamelCase to snake_case
    s = re.sub(r"([a-z])([A-Z])", r"\1_\2", s)
    s = s.lower().strip("_")
    s = re.sub(r"_+", "_", s)
    return s


def normalise_key(name: str) -> str:
    """snake_case a raw key and resolve known aliases."""
    key = to_snake_case(name)
    return FIELD_ALIASES.get(key, key)


def normalise_row(row: dict) -> dict:
    """Return a copy of a raw row with every key normalised.

    When two raw keys collapse onto the same name, the first one wins.
    """
    out: dict = {}
    for raw_key, val in row.items():
        key = normalise_key(raw_key)
        if key not in out:
            out[key] = val
    return out


def safe_bool(val: Any) -> bool:
    """Coerce a flag value from JSON or a spreadsheet cell to bool."""
    if isinstance(val, str):
        return val.strip().lower() in {"true", "1", "yes", "y", "on"}
    if val is None:
        return False
    try:
        if pd.isna(val):
            return False
    except (TypeError, ValueError):
        pass
    return bool(val)


def safe_text(val: Any) -> str | None:
    """Return stripped text, or None for blanks and missing values."""
    if val is None:
        return None
    if isinstance(val, float) and math.isnan(val):
        return None
    text = str(val).strip()
    return text or None


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the row containing signature keys.

    Cell values are snake_cased before matching. Returns the 1-based row
    index where at least two cells match, or None if not found within
    `max_rows`.
    """
    for row_idx in range(1, max_rows + 1):
        matches = 0
        for cell in sheet[row_idx]:
            if cell.value is not None and normalise_key(str(cell.value)) in signature:
                matches += 1
        if matches >= 2:
            return row_idx
    return None
