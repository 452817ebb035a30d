"""
Loader for JSON exports of the events, performances and staff_performances
tables.

Each export is either a JSON array of row objects or an object wrapping the
array under a "data" key (the shape a REST select returns). Keys may be
camelCase or snake_case; they are normalised here so the rollups only see
snake_case.
"""

import json
import logging
from pathlib import Path

from .utils import normalise_row

logger = logging.getLogger(__name__)


def load_json_rows(path: str | Path) -> list[dict]:
    """Load a JSON export into a list of key-normalised row dicts."""
    try:
        with open(path, encoding="utf-8") as fh:
            payload = json.load(fh)
    except Exception:
        logger.exception("Failed to read JSON export: %s", path)
        raise

    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of rows in {path}")

    rows = [normalise_row(row) for row in payload if isinstance(row, dict)]
    dropped = len(payload) - len(rows)
    if dropped:
        logger.warning("Dropped %d non-object entries from %s", dropped, path)

    logger.info("Loaded %d rows from %s", len(rows), path)
    return rows


def load_event_exports(
    events_path: str | Path,
    performances_path: str | Path,
    staff_performances_path: str | Path,
) -> tuple[list[dict], list[dict], list[dict]]:
    """Load the three table exports needed by rollup_events()."""
    return (
        load_json_rows(events_path),
        load_json_rows(performances_path),
        load_json_rows(staff_performances_path),
    )
