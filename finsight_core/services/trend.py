from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from finsight_core.domain.models import TrendResult
from finsight_core.services.stats import as_array, is_constant, safe_divide


def fit(values: Sequence[float]) -> Optional[TrendResult]:
    """
    Closed-form ordinary least squares over x = 1..n.

    Returns None when fewer than two points are given. A constant series is a
    perfect horizontal fit (slope 0, r2 1.0); if the total variance is zero but
    the residuals are not, r2 is None rather than NaN.
    """
    y = as_array(values)
    n = y.size
    if n < 2:
        return None

    if is_constant(y):
        return TrendResult(slope=0.0, intercept=float(y[0]), r2=1.0)

    x = np.arange(1, n + 1, dtype=float)
    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = float(np.dot(x, y))
    sum_x2 = float(np.dot(x, x))

    slope = safe_divide(n * sum_xy - sum_x * sum_y, n * sum_x2 - sum_x * sum_x)
    if slope is None:
        return None
    intercept = (sum_y - slope * sum_x) / n

    fitted = slope * x + intercept
    ss_res = float(np.sum((y - fitted) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))

    ratio = safe_divide(ss_res, ss_tot)
    if ratio is None:
        r2 = 1.0 if ss_res == 0 else None
    else:
        r2 = 1.0 - ratio

    return TrendResult(slope=float(slope), intercept=float(intercept), r2=r2)
