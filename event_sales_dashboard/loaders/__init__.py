"""Data ingestion loaders for event sales exports."""

from .records import load_json_rows, load_event_exports
from .staff_sheet import load_staff_daily_sheet

__all__ = [
    "load_json_rows",
    "load_event_exports",
    "load_staff_daily_sheet",
]
