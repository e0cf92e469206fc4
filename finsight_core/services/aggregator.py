from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

import pandas as pd
import structlog

from finsight_core.domain.models import PeriodBucket, Record, RecordKind

logger = structlog.get_logger()

SERIES_FIELDS = ("income", "expenses", "net")


def _parse_timestamp(value) -> Optional[pd.Timestamp]:
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    return ts


def _parse_amount(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def aggregate(records: Iterable[Record]) -> Dict[str, PeriodBucket]:
    """
    Monthly aggregation:
    - Buckets records by calendar month ("YYYY-MM").
    - Income and expense amounts are summed; other kinds (transfers) only open the bucket.
    - Records with an unreadable timestamp or amount are skipped, the rest still aggregate.
    """
    rows = []
    for idx, record in enumerate(records):
        ts = _parse_timestamp(record.timestamp)
        if ts is None:
            logger.warning("record_skipped", index=idx, reason="unparseable timestamp", value=str(record.timestamp))
            continue
        amount = _parse_amount(record.amount)
        if amount is None:
            logger.warning("record_skipped", index=idx, reason="non-numeric amount", value=str(record.amount))
            continue
        rows.append(
            {
                "month": str(ts.to_period("M")),
                "kind": str(record.kind).strip().lower(),
                "amount": amount,
            }
        )

    if not rows:
        return {}

    df = pd.DataFrame(rows)
    monthly = df.groupby(["month", "kind"])["amount"].sum().unstack(fill_value=0.0).sort_index()

    income = monthly.get(RecordKind.INCOME.value, pd.Series(0.0, index=monthly.index))
    expenses = monthly.get(RecordKind.EXPENSE.value, pd.Series(0.0, index=monthly.index))

    buckets: Dict[str, PeriodBucket] = {}
    for month in monthly.index:
        buckets[month] = PeriodBucket(
            period_key=month,
            income=float(income[month]),
            expenses=float(expenses[month]),
        )
    return buckets


def series(buckets: Dict[str, PeriodBucket], field: str) -> List[float]:
    """Project one bucket field into a list ordered by period key."""
    if field not in SERIES_FIELDS:
        raise ValueError(f"Unknown series field: {field!r} (expected one of {SERIES_FIELDS})")
    return [float(getattr(bucket, field)) for _, bucket in sorted(buckets.items())]
