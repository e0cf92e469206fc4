import pytest

from finsight_core.domain.models import PeriodBucket
from finsight_core.services.projector import forecast, project


def test_linear_history_is_extended():
    points = project([10, 20, 30, 40], periods_ahead=2)
    assert [p.step for p in points] == [1, 2]
    assert points[0].predicted == pytest.approx(50.0)
    assert points[1].predicted == pytest.approx(60.0)
    assert points[0].lower == pytest.approx(45.0)
    assert points[0].upper == pytest.approx(55.0)


def test_confidence_decays_and_is_floored():
    points = project([100, 110, 105, 120, 118], periods_ahead=12, base_confidence=0.85)
    confidences = [p.confidence for p in points]
    assert confidences[0] == pytest.approx(0.80)
    for prev, cur in zip(confidences, confidences[1:]):
        assert cur <= prev
    assert all(0.6 <= c <= 1.0 for c in confidences)
    assert confidences[-1] == pytest.approx(0.6)


def test_bands_stay_ordered_for_negative_predictions():
    points = project([30, 10, -10], periods_ahead=3)
    for p in points:
        assert p.predicted < 0
        assert p.lower <= p.predicted <= p.upper


def test_short_history_gives_empty_projection():
    assert project([1.0, 2.0], periods_ahead=6) == []
    assert project([], periods_ahead=6) == []


def test_forecast_merges_income_and_expenses():
    buckets = {
        key: PeriodBucket(period_key=key, income=inc, expenses=exp)
        for key, inc, exp in [
            ("2024-10", 1000.0, 400.0),
            ("2024-11", 1100.0, 450.0),
            ("2024-12", 1200.0, 500.0),
        ]
    }
    points = forecast(buckets, periods_ahead=3)
    assert [p.period_label for p in points] == ["2025-01", "2025-02", "2025-03"]
    assert points[0].income_predicted == pytest.approx(1300.0)
    assert points[0].expenses_predicted == pytest.approx(550.0)
    assert points[0].net_predicted == pytest.approx(750.0)
    assert points[0].income_upper == pytest.approx(1430.0)


def test_forecast_needs_three_months():
    buckets = {
        "2024-01": PeriodBucket(period_key="2024-01", income=1.0, expenses=1.0),
        "2024-02": PeriodBucket(period_key="2024-02", income=2.0, expenses=1.0),
    }
    assert forecast(buckets) == []
    assert forecast({}) == []
