import math

import pytest

from finsight_core.services.trend import fit


def test_perfect_line():
    result = fit([10, 20, 30, 40])
    assert result.slope == pytest.approx(10.0)
    assert result.intercept == pytest.approx(0.0, abs=1e-9)
    assert result.r2 == pytest.approx(1.0)


def test_constant_series_has_defined_r2():
    result = fit([5, 5, 5, 5])
    assert result.slope == 0.0
    assert result.intercept == 5.0
    assert result.r2 is not None
    assert not math.isnan(result.r2)
    assert result.r2 == 1.0


def test_noisy_series_r2_between_zero_and_one():
    result = fit([3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0])
    assert result.slope > 0
    assert 0.0 < result.r2 < 1.0


def test_prediction_uses_one_based_positions():
    result = fit([2.0, 4.0, 6.0])
    assert result.predict(4) == pytest.approx(8.0)


@pytest.mark.parametrize("values", [[], [42.0]])
def test_insufficient_points_return_none(values):
    assert fit(values) is None


def test_input_is_not_mutated():
    values = [1.0, 3.0, 2.0]
    fit(values)
    assert values == [1.0, 3.0, 2.0]


def test_zero_total_variance_with_residuals_leaves_r2_undefined(monkeypatch):
    from finsight_core.services import trend as trend_module
    from finsight_core.services.stats import safe_divide

    calls = []

    def fake_divide(numerator, denominator):
        calls.append((numerator, denominator))
        # slope is computed normally; the SS_res / SS_tot ratio has no denominator
        if len(calls) == 1:
            return safe_divide(numerator, denominator)
        return None

    monkeypatch.setattr(trend_module, "safe_divide", fake_divide)

    assert fit([3.0, 1.0, 4.0, 1.0]).r2 is None
    calls.clear()
    assert fit([1.0, 2.0, 3.0]).r2 == 1.0
