"""
Tests for event_sales_dashboard.loaders — coercion helpers, JSON exports and
the staff daily workbook.
"""

import json
import math

import numpy as np
import openpyxl
import pandas as pd
import pytest

from event_sales_dashboard.loaders import (
    load_event_exports,
    load_json_rows,
    load_staff_daily_sheet,
)
from event_sales_dashboard.loaders.utils import (
    normalise_date,
    normalise_row,
    safe_bool,
    safe_count,
    safe_text,
    to_snake_case,
)
from event_sales_dashboard.rollup import rollup_staff


# ── Coercion helpers ─────────────────────────────────────────

class TestSafeCount:
    @pytest.mark.parametrize("raw, expected", [
        (3, 3),
        ("3", 3),
        (" 2 ", 2),
        (2.0, 2),
        (None, 0),
        ("", 0),
        ("abc", 0),
        (math.nan, 0),
        (math.inf, 0),
        (1.5, 0),
        ("3.0", 3),
        ("-2", -2),
        (2**53 + 1, 2**53 + 1),
        (str(2**53 + 1), 2**53 + 1),
        (2**63 - 1, 2**63 - 1),
        (2**63, 0),
        (np.int64(7), 7),
    ])
    def test_coercion(self, raw, expected):
        assert safe_count(raw) == expected


class TestKeys:
    @pytest.mark.parametrize("raw, expected", [
        ("auMnpSp1", "au_mnp_sp1"),
        ("cellUpSim", "cell_up_sim"),
        ("staff_name", "staff_name"),
        ("Staff Name", "staff_name"),
        ("credit-card", "credit_card"),
    ])
    def test_snake_case(self, raw, expected):
        assert to_snake_case(raw) == expected

    def test_aliases(self):
        row = normalise_row({"successCase1": "a", "agencyName": "Tokai", "includeCellupInHsTotal": True})
        assert row == {"success_case_1": "a", "team": "Tokai", "include_cell_up": True}

    def test_first_key_wins(self):
        assert normalise_row({"auMnpSp1": 1, "au_mnp_sp1": 9}) == {"au_mnp_sp1": 1}


class TestScalars:
    def test_safe_bool(self):
        assert safe_bool("TRUE") is True
        assert safe_bool("no") is False
        assert safe_bool(None) is False
        assert safe_bool(1) is True
        assert safe_bool(math.nan) is False

    def test_safe_text(self):
        assert safe_text("  hello ") == "hello"
        assert safe_text("   ") is None
        assert safe_text(math.nan) is None

    def test_normalise_date(self):
        assert normalise_date(1) == pd.Timestamp("1899-12-31")
        assert normalise_date(45843) == pd.Timestamp("2025-07-05")
        assert normalise_date("2025-07-05") == pd.Timestamp("2025-07-05")
        assert normalise_date("") is None
        assert normalise_date(None) is None
        assert normalise_date("not a date") is None


# ── JSON exports ─────────────────────────────────────────────

class TestJsonRows:
    def test_array_form(self, tmp_path):
        path = tmp_path / "staff_performances.json"
        path.write_text(json.dumps([{"eventId": "e1", "staffName": "Ito", "auMnpSp1": 2}]))
        assert load_json_rows(path) == [{"event_id": "e1", "staff_name": "Ito", "au_mnp_sp1": 2}]

    def test_data_wrapper_form(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"data": [{"id": "e1"}, {"id": "e2"}]}))
        assert [r["id"] for r in load_json_rows(path)] == ["e1", "e2"]

    def test_non_object_entries_dropped(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps([{"id": "e1"}, 5, "x"]))
        assert load_json_rows(path) == [{"id": "e1"}]

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("42")
        with pytest.raises(ValueError):
            load_json_rows(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json_rows(tmp_path / "missing.json")

    def test_exports(self, tmp_path):
        (tmp_path / "events.json").write_text(json.dumps([{"id": "e1"}]))
        (tmp_path / "performances.json").write_text(json.dumps([{"eventId": "e1", "targetHsTotal": 4}]))
        (tmp_path / "staff.json").write_text(json.dumps([]))
        events, performances, staff = load_event_exports(
            tmp_path / "events.json", tmp_path / "performances.json", tmp_path / "staff.json",
        )
        assert events == [{"id": "e1"}]
        assert performances == [{"event_id": "e1", "target_hs_total": 4}]
        assert staff == []


# ── Staff daily workbook ─────────────────────────────────────

def _write_workbook(path, rows):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Daily"
    for row in rows:
        ws.append(row)
    wb.save(path)


class TestStaffDailySheet:
    def test_header_below_title_rows(self, tmp_path):
        path = tmp_path / "staff_daily_entry.xlsx"
        _write_workbook(path, [
            ["Staff daily entry - Lalaport Tokyo-Bay"],
            [],
            ["staffName", "dayNumber", "auMnpSp1", "cell_up_sim", "notes"],
            ["Tanaka", 1, 2, None, "rain"],
            ["Tanaka", 2, 1, 1, None],
            ["Suzuki", 1, None, 2, None],
            [],
            ["Totals", None, 3, 3, None],
        ])
        df = load_staff_daily_sheet(str(path))
        assert list(df.columns) == ["staff_name", "day_number", "au_mnp_sp1", "cell_up_sim", "notes"]
        assert list(df["staff_name"]) == ["Tanaka", "Tanaka", "Suzuki"]

    def test_feeds_staff_rollup(self, tmp_path):
        path = tmp_path / "staff_daily_entry.xlsx"
        _write_workbook(path, [
            ["staff_name", "day_number", "au_mnp_sp1", "cell_up_sim"],
            ["Tanaka", 1, 2, None],
            ["Tanaka", 2, 1, 1],
        ])
        staff = rollup_staff(load_staff_daily_sheet(str(path)))
        assert staff[0]["au_mnp_total"] == 3
        assert staff[0]["cell_up_total"] == 1

    def test_no_header(self, tmp_path):
        path = tmp_path / "staff_daily_entry.xlsx"
        _write_workbook(path, [["hello", "world"], [1, 2]])
        with pytest.raises(ValueError):
            load_staff_daily_sheet(str(path))
