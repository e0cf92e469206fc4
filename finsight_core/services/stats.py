from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np


def safe_divide(numerator: float, denominator: float) -> Optional[float]:
    """
    Ratio helper shared by every rate/score computation.
    Returns None instead of letting a zero or non-finite denominator
    turn into NaN/Infinity.
    """
    if denominator == 0 or not math.isfinite(denominator) or not math.isfinite(numerator):
        return None
    return numerator / denominator


def as_array(values: Sequence[float]) -> np.ndarray:
    # copy so callers' sequences are never touched
    return np.array(values, dtype=float, copy=True)


def is_constant(arr: np.ndarray) -> bool:
    return arr.size > 0 and bool(np.ptp(arr) == 0)


def mean(values: Sequence[float]) -> Optional[float]:
    arr = as_array(values)
    if arr.size == 0:
        return None
    return float(arr.mean())
