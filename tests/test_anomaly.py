import pytest

from finsight_core.domain.models import Impact, PeriodBucket, RecordKind
from finsight_core.services.anomaly import describe, detect, z_scores

SCENARIO = [500, 520, 510, 530, 515, 525, 540, 560, 2000, 530, 520, 535]


def test_single_outlier_is_flagged():
    assert detect([10, 10, 10, 10, 10, 100], threshold=2) == [5]


def test_score_equal_to_threshold_is_not_flagged():
    values = [10, 10, 10, 10, 100]
    assert z_scores(values) == pytest.approx([0.5, 0.5, 0.5, 0.5, 2.0])
    assert detect(values, threshold=2) == []
    assert detect(values, threshold=1.99) == [4]


@pytest.mark.parametrize("threshold", [0.0, 0.5, 2.0, 10.0])
def test_constant_series_never_flags(threshold):
    assert detect([7.5] * 6, threshold=threshold) == []
    assert detect([0.1] * 6, threshold=threshold) == []


def test_empty_series():
    assert detect([]) == []
    assert z_scores([]) == []


def test_monthly_spike_scenario():
    assert detect(SCENARIO, threshold=2) == [8]


def test_threshold_is_strict():
    # z-scores of [0, 2] are exactly 1.0
    assert detect([0.0, 2.0], threshold=1.0) == []
    assert detect([0.0, 2.0], threshold=0.99) == [0, 1]


def test_describe_maps_indices_to_months():
    buckets = {
        f"2024-{m:02d}": PeriodBucket(period_key=f"2024-{m:02d}", income=1000.0, expenses=v)
        for m, v in zip(range(1, 13), SCENARIO)
    }
    points = describe([8], buckets, RecordKind.EXPENSE)
    assert len(points) == 1
    assert points[0].period_key == "2024-09"
    assert points[0].value == 2000
    assert points[0].severity == Impact.HIGH
