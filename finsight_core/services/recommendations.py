from __future__ import annotations

import calendar
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from finsight_core.domain.models import (
    Impact,
    PeriodBucket,
    Recommendation,
    RecommendationKind,
    SeasonalResult,
)
from finsight_core.services.aggregator import series
from finsight_core.services.stats import mean, safe_divide

LOW_SAVINGS_PCT = 10.0
HIGH_SAVINGS_PCT = 20.0
SPIKE_FACTOR = 1.2
RECENT_PERIODS = 3


def savings_rate(buckets: Dict[str, PeriodBucket]) -> Optional[float]:
    """Average savings rate in percent, None when average income is zero."""
    avg_income = mean(series(buckets, "income"))
    avg_expenses = mean(series(buckets, "expenses"))
    if avg_income is None or avg_expenses is None:
        return None
    ratio = safe_divide(avg_income - avg_expenses, avg_income)
    return None if ratio is None else ratio * 100


def _phase_month_name(first_period_key: str, phase: int) -> str:
    month = (pd.Period(first_period_key, freq="M") + phase).month
    return calendar.month_name[month]


def _low_savings(rate: Optional[float]) -> Optional[Recommendation]:
    if rate is None or rate >= LOW_SAVINGS_PCT:
        return None
    return Recommendation(
        kind=RecommendationKind.WARNING,
        title="Low Savings Rate",
        description=(
            f"Your current savings rate is {rate:.1f}%. "
            "Consider reducing expenses or increasing income."
        ),
        impact=Impact.HIGH,
        actionable=True,
        rule="low_savings_rate",
        metrics={"savings_rate": round(rate, 4)},
    )


def _recent_spike(expenses: List[float]) -> Optional[Recommendation]:
    avg = mean(expenses)
    if avg is None:
        return None
    limit = avg * SPIKE_FACTOR
    recent = expenses[-RECENT_PERIODS:]
    if not any(value > limit for value in recent):
        return None
    return Recommendation(
        kind=RecommendationKind.ALERT,
        title="Spending Spike Detected",
        description=(
            "Recent expenses are 20% above average. "
            "Review recent transactions for optimization opportunities."
        ),
        impact=Impact.MEDIUM,
        actionable=True,
        rule="spending_spike",
        metrics={"average_expenses": round(avg, 2), "peak_recent": round(max(recent), 2)},
    )


def _anomalous_months(
    periods: List[str],
    expenses: List[float],
    anomalies: Sequence[int],
) -> Optional[Recommendation]:
    # spikes only: above-average months the recent-spike rule has not reported
    avg = mean(expenses) or 0.0
    recent_start = max(len(expenses) - RECENT_PERIODS, 0)
    covered = {i for i in range(recent_start, len(expenses)) if expenses[i] > avg * SPIKE_FACTOR}
    flagged = [i for i in anomalies if 0 <= i < len(periods) and i not in covered and expenses[i] > avg]
    if not flagged:
        return None
    months = ", ".join(periods[i] for i in flagged)
    peak = max(expenses[i] for i in flagged)
    return Recommendation(
        kind=RecommendationKind.ALERT,
        title="Unusual Spending Month",
        description=(
            f"A spending spike stands out in {months} (up to {peak:,.2f} against an average of {avg:,.2f}). "
            "Check whether it was a one-off or a recurring cost."
        ),
        impact=Impact.MEDIUM,
        actionable=True,
        rule="expense_anomaly",
        metrics={"months": months, "peak_expenses": round(peak, 2)},
    )


def _excellent_savings(rate: Optional[float]) -> Optional[Recommendation]:
    if rate is None or rate <= HIGH_SAVINGS_PCT:
        return None
    return Recommendation(
        kind=RecommendationKind.SUCCESS,
        title="Excellent Savings Rate",
        description=(
            f"Your {rate:.1f}% savings rate is excellent. "
            "Consider investing surplus funds for growth."
        ),
        impact=Impact.POSITIVE,
        actionable=True,
        rule="excellent_savings_rate",
        metrics={"savings_rate": round(rate, 4)},
    )


def _seasonal_peak(first_period_key: str, seasonal: SeasonalResult) -> Recommendation:
    phase = int(np.argmax(seasonal.seasonal_pattern)) if seasonal.seasonal_pattern else 0
    month_name = _phase_month_name(first_period_key, phase)
    return Recommendation(
        kind=RecommendationKind.INFO,
        title="Seasonal Spending Pattern",
        description=(
            f"Your highest spending typically occurs in {month_name}. "
            "Plan ahead to manage cash flow."
        ),
        impact=Impact.LOW,
        actionable=False,
        rule="seasonal_peak",
        metrics={"month": month_name, "phase": phase},
    )


def recommend(
    buckets: Dict[str, PeriodBucket],
    seasonal: SeasonalResult,
    anomalies: Optional[Sequence[int]] = None,
) -> List[Recommendation]:
    """
    Rule-based advice, always evaluated in the same order:
    low savings, recent spike, anomalous months, excellent savings, seasonal peak.
    `anomalies` are expense-series indices (see anomaly.detect); the seasonal
    result is expected to come from the expense series.
    """
    if not buckets:
        return []

    periods = sorted(buckets)
    expenses = series(buckets, "expenses")
    rate = savings_rate(buckets)

    candidates = [
        _low_savings(rate),
        _recent_spike(expenses),
        _anomalous_months(periods, expenses, anomalies or []),
        _excellent_savings(rate),
        _seasonal_peak(periods[0], seasonal),
    ]
    return [rec for rec in candidates if rec is not None]
