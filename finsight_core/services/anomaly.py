from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from finsight_core.domain.models import AnomalyPoint, Impact, PeriodBucket, RecordKind
from finsight_core.services.stats import as_array, is_constant

SEVERITY = {
    RecordKind.EXPENSE: Impact.HIGH,
    RecordKind.INCOME: Impact.MEDIUM,
}


def z_scores(values: Sequence[float]) -> List[float]:
    """Population z-scores; an empty or constant series scores 0 everywhere."""
    data = as_array(values)
    if data.size == 0 or is_constant(data):
        return [0.0] * data.size
    std = data.std()  # ddof=0
    if std == 0:
        return [0.0] * data.size
    return (np.abs(data - data.mean()) / std).tolist()


def detect(values: Sequence[float], threshold: float = 2.0) -> List[int]:
    """Indices whose z-score is strictly above `threshold`, ascending."""
    scores = z_scores(values)
    return [idx for idx, score in enumerate(scores) if score > threshold]


def describe(indices: Sequence[int], buckets: Dict[str, PeriodBucket], kind: RecordKind) -> List[AnomalyPoint]:
    field = "expenses" if kind == RecordKind.EXPENSE else "income"
    ordered = [buckets[key] for key in sorted(buckets)]
    points = []
    for idx in indices:
        bucket = ordered[idx]
        points.append(
            AnomalyPoint(
                period_key=bucket.period_key,
                value=float(getattr(bucket, field)),
                kind=kind,
                severity=SEVERITY[kind],
            )
        )
    return points
