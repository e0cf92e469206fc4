from __future__ import annotations

from typing import Sequence

import numpy as np

from finsight_core.domain.models import SeasonalResult
from finsight_core.services.stats import as_array


def moving_average_trend(values: np.ndarray, period: int) -> np.ndarray:
    # indices without a full centered window keep their raw value
    n = values.size
    back = period // 2
    ahead = period - back  # ceil(period / 2)
    trend = values.copy()
    for i in range(back, n - ahead):
        trend[i] = values[i - back : i + ahead].sum() / period
    return trend


def decompose(values: Sequence[float], period: int = 12) -> SeasonalResult:
    """
    Additive decomposition value = trend + seasonal + residual.
    - Trend: centered moving average of width `period` (boundary points fall back to the raw value).
    - Seasonal: mean detrended value per phase (i mod period), 0 for phases never observed.
    - Residual: whatever the two components leave.
    Inputs shorter than `period` are accepted; every point is then a boundary point.
    """
    if period < 1:
        raise ValueError("period must be >= 1")

    data = as_array(values)
    trend = moving_average_trend(data, period)

    phases = np.arange(data.size) % period
    totals = np.bincount(phases, weights=data - trend, minlength=period)
    counts = np.bincount(phases, minlength=period)
    pattern = np.divide(totals, counts, out=np.zeros(period, dtype=float), where=counts > 0)

    seasonal = pattern[phases]
    residual = data - trend - seasonal

    return SeasonalResult(
        trend=trend.tolist(),
        seasonal=seasonal.tolist(),
        residual=residual.tolist(),
        seasonal_pattern=pattern.tolist(),
    )
