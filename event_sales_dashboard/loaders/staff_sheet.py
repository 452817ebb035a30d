"""
Loader for the staff daily-entry workbook.

Field teams that cannot reach the entry form keep a spreadsheet with one row
per staff member per day. The header row sits somewhere in the first 20 rows
(title rows above it vary by team) and carries counter names in either
camelCase or snake_case, e.g. "staffName", "auMnpSp1", "cell_up_sim".
"""

import logging

import openpyxl
import pandas as pd

from ..config import COUNTER_FIELDS
from .utils import find_header_row, normalise_key, safe_count, safe_text

logger = logging.getLogger(__name__)

_HEADER_SIGNATURE = {"staff_name", "day_number"} | set(COUNTER_FIELDS)


def load_staff_daily_sheet(path: str, sheet_name: str | None = None) -> pd.DataFrame:
    """Load staff daily rows from an Excel workbook.

    Assumptions
    -----------
    - The header row contains at least two recognised column names.
    - A row with an empty staff-name cell and no counters ends the table.
    - Unrecognised columns (e.g. event_id, notes) are carried through.

    Returns
    -------
    DataFrame with one row per staff per day and snake_case columns.
    Counter cells are raw; normalise_daily_records() applies the 0 defaults.
    """
    try:
        wb = openpyxl.load_workbook(path, data_only=True, read_only=False)
    except Exception:
        logger.exception("Failed to open staff daily workbook: %s", path)
        raise

    if sheet_name is None or sheet_name not in wb.sheetnames:
        if sheet_name is not None:
            logger.warning("Sheet '%s' not found, using '%s'", sheet_name, wb.sheetnames[0])
        sheet_name = wb.sheetnames[0]
    ws = wb[sheet_name]

    header_row = find_header_row(ws, _HEADER_SIGNATURE)
    if header_row is None:
        wb.close()
        raise ValueError(f"No staff daily header row found in {path} [{sheet_name}]")

    col_map: dict[int, str] = {}
    for cell in ws[header_row]:
        if cell.value is None:
            continue
        col_map[cell.column] = normalise_key(str(cell.value))

    rows = []
    for values in ws.iter_rows(min_row=header_row + 1, values_only=True):
        record = {}
        for col_idx, name in col_map.items():
            record[name] = values[col_idx - 1] if col_idx - 1 < len(values) else None

        staff = safe_text(record.get("staff_name"))
        has_counts = any(safe_count(record.get(f)) for f in COUNTER_FIELDS)
        if staff is None and not has_counts:
            break
        rows.append(record)

    wb.close()

    if not rows:
        logger.warning("No staff daily rows extracted from %s", path)

    df = pd.DataFrame(rows, columns=list(dict.fromkeys(col_map.values())))
    logger.info("Loaded %d staff daily rows from %s", len(df), path)
    return df
