"""
Tests for event_sales_dashboard.achievement — target achievement rates.
"""

from event_sales_dashboard.achievement import (
    achievement_status,
    classify_achievement,
    evaluate_achievement,
    is_achieved,
    is_eligible,
)
from event_sales_dashboard.rollup import rollup_event


# ── Per-event classification ─────────────────────────────────

class TestClassification:
    def test_eligible_needs_positive_target(self, make_summary):
        assert is_eligible(make_summary(target_headline=1))
        assert not is_eligible(make_summary(target_headline=0))
        assert not is_eligible(make_summary(target_headline=None))

    def test_met_target_counts_as_achieved(self, make_summary):
        assert is_achieved(make_summary(target_headline=10, actual_headline=10)) is True
        assert is_achieved(make_summary(target_headline=10, actual_headline=9)) is False

    def test_no_target_is_not_a_failure(self, make_summary):
        event = make_summary(target_headline=0, actual_headline=5)
        assert is_achieved(event) is None
        assert classify_achievement(event) == "no_target"

    def test_status_counts(self, make_summary):
        events = [
            make_summary(target_headline=10, actual_headline=12),
            make_summary(target_headline=0, actual_headline=5),
            make_summary(target_headline=20, actual_headline=15),
            make_summary(target_headline=20, actual_headline=25),
        ]
        assert achievement_status(events) == {"achieved": 2, "not_achieved": 1, "no_target": 1}


# ── Monthly rates ────────────────────────────────────────────

class TestEvaluateAchievement:
    def test_ineligible_events_excluded_from_rate(self, make_summary):
        events = [
            make_summary(target_headline=10, actual_headline=12),
            make_summary(target_headline=0, actual_headline=5),
            make_summary(target_headline=20, actual_headline=15),
        ]
        (july,) = evaluate_achievement(events)
        assert july["month"] == "2025-07"
        assert july["event_count"] == 3
        assert july["eligible_count"] == 2
        assert july["achieved_count"] == 1
        assert july["rate"] == 50
        assert july["total_target"] == 30
        assert july["total_actual"] == 27

    def test_mnp_ratio_over_all_events(self, make_summary):
        events = [
            make_summary(target_headline=5, actual_mnp_total=12, actual_new_total=8),
            make_summary(target_headline=0, actual_mnp_total=8, actual_new_total=4),
        ]
        (july,) = evaluate_achievement(events)
        assert july["total_mnp"] == 20
        assert july["total_new"] == 12
        assert july["mnp_ratio"] == 63

    def test_no_eligible_events(self, make_summary):
        (july,) = evaluate_achievement([make_summary(target_headline=0, actual_headline=9)])
        assert july["eligible_count"] == 0
        assert july["rate"] == 0
        assert july["mnp_ratio"] == 0

    def test_months_ascending(self, make_summary):
        events = [
            make_summary(date="2025-09-01", month=9, target_headline=1, actual_headline=1),
            make_summary(date="2025-07-01", target_headline=1, actual_headline=0),
            make_summary(date="2025-08-01", month=8, target_headline=1, actual_headline=1),
        ]
        result = evaluate_achievement(events)
        assert [m["month"] for m in result] == ["2025-07", "2025-08", "2025-09"]
        assert [m["rate"] for m in result] == [0, 100, 100]

    def test_grouped_by_reporting_month_not_start_date(self, make_summary):
        events = [
            make_summary(date="2025-06-30", year=2025, month=7, target_headline=10, actual_headline=10),
            make_summary(date="2025-06-10", year=2025, month=6, target_headline=10, actual_headline=4),
        ]
        june, july = evaluate_achievement(events)
        assert (june["month"], june["event_count"], june["rate"]) == ("2025-06", 1, 0)
        assert (july["month"], july["event_count"], july["rate"]) == ("2025-07", 1, 100)

    def test_event_starting_before_its_reporting_month(self):
        summary = rollup_event(
            {"target_hs_total": 1},
            [{"staff_name": "Ito", "au_mnp_sp1": 2}],
            False,
            {"startDate": "2025-06-30", "endDate": "2025-07-01", "year": 2025, "month": 7, "weekNumber": 1},
        )
        (result,) = evaluate_achievement([summary])
        assert result["month"] == "2025-07"
        assert result["achieved_count"] == 1

    def test_falls_back_to_start_date(self, make_summary):
        (result,) = evaluate_achievement([make_summary(date="2025-08-03", year=None, month=None, target_headline=2)])
        assert result["month"] == "2025-08"

    def test_undated_events_skipped(self, make_summary):
        events = [make_summary(date=None, year=None, month=None, target_headline=3)]
        assert evaluate_achievement(events) == []

    def test_empty(self):
        assert evaluate_achievement([]) == []
