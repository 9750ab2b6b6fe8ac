from datetime import timedelta

import pytest

from packages.caselogic.sla import classify_sla, sla_breakdown
from tests.factories import NOW, make_case, minutes_ago


@pytest.mark.parametrize("elapsed", [0, 5, 20.99, 21.0])
def test_on_track_up_to_seventy_percent(elapsed: float) -> None:
    assert classify_sla(minutes_ago(elapsed), now=NOW) == "OnTrack"


@pytest.mark.parametrize("elapsed", [21.01, 25, 30])
def test_at_risk_until_target(elapsed: float) -> None:
    assert classify_sla(minutes_ago(elapsed), now=NOW) == "AtRisk"


@pytest.mark.parametrize("elapsed", [30.01, 45, 600])
def test_breached_after_target(elapsed: float) -> None:
    assert classify_sla(minutes_ago(elapsed), now=NOW) == "Breached"


def test_custom_target_scales_threshold() -> None:
    assert classify_sla(minutes_ago(40), target_minutes=60, now=NOW) == "OnTrack"
    assert classify_sla(minutes_ago(45), target_minutes=60, now=NOW) == "AtRisk"
    assert classify_sla(minutes_ago(61), target_minutes=60, now=NOW) == "Breached"


def test_future_created_at_is_on_track() -> None:
    assert classify_sla(NOW + timedelta(minutes=5), now=NOW) == "OnTrack"


def test_missing_created_at_is_indeterminate() -> None:
    assert classify_sla(None, now=NOW) is None


def test_naive_timestamp_treated_as_utc() -> None:
    naive = minutes_ago(25).replace(tzinfo=None)
    assert classify_sla(naive, now=NOW) == "AtRisk"


def test_sla_breakdown_counts_each_bucket() -> None:
    cases = [
        make_case(id="a", createdAt=minutes_ago(5).isoformat()),
        make_case(id="b", createdAt=minutes_ago(25).isoformat()),
        make_case(id="c", createdAt=minutes_ago(90).isoformat()),
        make_case(id="d", createdAt=None),
    ]
    counts = sla_breakdown(cases, now=NOW)
    assert counts == {"OnTrack": 1, "AtRisk": 1, "Breached": 1, "Unknown": 1, "total": 4}
