import pytest


def _summary(**overrides):
    summary = {
        "event_id": "evt",
        "venue": "Aeon Mall Makuhari",
        "team": "Kanto East",
        "date": "2025-07-05",
        "year": 2025,
        "month": 7,
        "week_number": 1,
        "target_headline": 0,
        "actual_headline": 0,
        "actual_au_mnp": 0,
        "actual_uq_mnp": 0,
        "actual_au_new": 0,
        "actual_uq_new": 0,
        "actual_cell_up": 0,
        "actual_mnp_total": 0,
        "actual_new_total": 0,
        "total_new_ids": 0,
        "actual_ltv_total": 0,
        "staff": [],
    }
    summary.update(overrides)
    return summary


@pytest.fixture
def make_summary():
    """Factory for minimal EventSummary-shaped dicts used in cross-event tests."""
    return _summary


@pytest.fixture
def tanaka_records():
    return [
        {"staffName": "Tanaka", "dayNumber": 1, "auMnpSp1": 2, "auMnpSp2": 1},
        {"staffName": "Tanaka", "dayNumber": 2, "auMnpSp1": 1},
    ]


@pytest.fixture
def mixed_records():
    """Two staff over two days: MNP 10, new-line 5, cell-up 3."""
    return [
        {"staff_name": "Tanaka", "day_number": 1, "au_mnp_sp1": 4, "uq_mnp_sim": 2,
         "au_hs_sp2": 1, "cell_up_sp1": 2, "credit_card": 1},
        {"staff_name": "Suzuki", "day_number": 1, "uq_mnp_sp1": 1, "uq_hs_sp1": 2,
         "cell_up_sim": 1, "warranty": 2},
        {"staff_name": "Tanaka", "day_number": 2, "au_mnp_sim": 2, "uq_hs_sim": 1},
        {"staff_name": "Suzuki", "day_number": 2, "au_mnp_sp2": 1, "au_hs_sp1": 1,
         "network_count": 3},
    ]


@pytest.fixture
def sample_event():
    return {
        "id": "evt-001",
        "venue": "Lalaport Tokyo-Bay",
        "agencyName": "Kanto West",
        "startDate": "2025-07-05",
        "endDate": "2025-07-06",
        "weekNumber": 1,
        "includeCellupInHsTotal": False,
    }


@pytest.fixture
def sample_target_row():
    return {
        "eventId": "evt-001",
        "targetHsTotal": 14,
        "targetAuMnp": 5,
        "targetUqMnp": 5,
        "targetAuNew": 2,
        "targetUqNew": 2,
        "operationDetails": "Two booths at the entrance",
        "successCase1": "Family switched together",
    }
