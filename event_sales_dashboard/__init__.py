"""
Event Sales Dashboard — performance rollup and aggregation engine

Turns per-staff-per-day sales counters from traveling retail events into
staff summaries, event summaries and cross-event analytics (venue, team and
monthly stats, target achievement).

To feed it from the database:
    Pass the rows of the events, performances and staff_performances tables
    (as dicts, camelCase or snake_case keys) to rollup.rollup_events(). The
    engine is pure; re-run it whenever the rows change.

To serve an API or dashboard:
    Call dashboard.get_event_detail(...) for a single event and
    dashboard.get_analytics_overview(summaries) for cross-event views. Both
    return plain dicts ready for JSON.

To add a sales category:
    Add an entry to config.CATEGORY_REGISTRY with its group and raw counter
    prefix; every rollup picks it up through metrics.
"""
