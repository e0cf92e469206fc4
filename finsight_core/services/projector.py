from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from finsight_core.domain.models import ForecastPoint, PeriodBucket, Projection
from finsight_core.services import trend as trend_model
from finsight_core.services.aggregator import series

MIN_HISTORY = 3
CONFIDENCE_FLOOR = 0.6
CONFIDENCE_CEILING = 1.0
CONFIDENCE_DECAY = 0.05


def step_confidence(base_confidence: float, step: int) -> float:
    return min(CONFIDENCE_CEILING, max(CONFIDENCE_FLOOR, base_confidence - CONFIDENCE_DECAY * step))


def project(
    history: Sequence[float],
    periods_ahead: int,
    variance_ratio: float = 0.1,
    base_confidence: float = 0.85,
) -> List[Projection]:
    """
    Extend the OLS trend of `history` for `periods_ahead` steps.
    Bands are +/- variance_ratio of the predicted magnitude and confidence
    decays by a fixed step per period, floored at 0.6.
    Histories shorter than three points give an empty projection.
    """
    n = len(history)
    if n < MIN_HISTORY or periods_ahead <= 0:
        return []

    fitted = trend_model.fit(history)
    if fitted is None:
        return []

    projections: List[Projection] = []
    for k in range(1, periods_ahead + 1):
        predicted = fitted.predict(n + k)
        spread = abs(predicted) * variance_ratio
        projections.append(
            Projection(
                step=k,
                predicted=predicted,
                lower=predicted - spread,
                upper=predicted + spread,
                confidence=step_confidence(base_confidence, k),
            )
        )
    return projections


def future_labels(last_period_key: str, periods_ahead: int) -> List[str]:
    start = pd.Period(last_period_key, freq="M")
    return [str(start + k) for k in range(1, periods_ahead + 1)]


def forecast(
    buckets: Dict[str, PeriodBucket],
    periods_ahead: int = 6,
    variance_ratio: float = 0.1,
    base_confidence: float = 0.85,
) -> List[ForecastPoint]:
    """Project income and expenses on the same monthly grid and merge them."""
    if not buckets:
        return []

    income = project(series(buckets, "income"), periods_ahead, variance_ratio, base_confidence)
    expenses = project(series(buckets, "expenses"), periods_ahead, variance_ratio, base_confidence)
    if not income or not expenses:
        return []

    labels = future_labels(max(buckets), periods_ahead)
    points: List[ForecastPoint] = []
    for label, inc, exp in zip(labels, income, expenses):
        points.append(
            ForecastPoint(
                period_label=label,
                expenses_predicted=exp.predicted,
                income_predicted=inc.predicted,
                expenses_lower=exp.lower,
                expenses_upper=exp.upper,
                income_lower=inc.lower,
                income_upper=inc.upper,
                confidence=exp.confidence,
            )
        )
    return points
