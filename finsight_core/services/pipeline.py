from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, Iterable, Optional

import structlog

from finsight_core.domain.models import (
    AnalysisConfig,
    AnalysisReport,
    ForecastingSession,
    Record,
    RecordKind,
)
from finsight_core.services import aggregator, anomaly, projector, recommendations, seasonal, trend

logger = structlog.get_logger()


def analyze(
    records: Iterable[Record],
    config: Optional[AnalysisConfig] = None,
    session: Optional[ForecastingSession] = None,
) -> AnalysisReport:
    """
    One full pass: aggregate -> trend/seasonal/anomaly -> forecast/recommendations.
    The forecast starts from the session confidence when a session is given.
    """
    config = config or AnalysisConfig()
    session = session or ForecastingSession(confidence=config.base_confidence)

    buckets = aggregator.aggregate(records)
    income = aggregator.series(buckets, "income")
    expenses = aggregator.series(buckets, "expenses")
    net = aggregator.series(buckets, "net")

    expense_idx = anomaly.detect(expenses, config.threshold)
    income_idx = anomaly.detect(income, config.threshold)
    decomposition = seasonal.decompose(expenses, config.period)

    report = AnalysisReport(
        config=config,
        session=session,
        buckets=buckets,
        income_trend=trend.fit(income),
        expense_trend=trend.fit(expenses),
        net_trend=trend.fit(net),
        seasonal=decomposition,
        expense_anomalies=anomaly.describe(expense_idx, buckets, RecordKind.EXPENSE),
        income_anomalies=anomaly.describe(income_idx, buckets, RecordKind.INCOME),
        forecast=projector.forecast(
            buckets,
            periods_ahead=config.periods_ahead,
            variance_ratio=config.variance_ratio,
            base_confidence=session.confidence,
        ),
        recommendations=recommendations.recommend(buckets, decomposition, expense_idx),
    )
    logger.info(
        "analysis_complete",
        periods=len(buckets),
        expense_anomalies=len(expense_idx),
        income_anomalies=len(income_idx),
        forecast_points=len(report.forecast),
        recommendations=len(report.recommendations),
    )
    return report


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, enum.Enum):
        return value.value
    return value


def report_to_dict(report: AnalysisReport) -> Dict[str, Any]:
    payload = _plain(report)
    payload["buckets"] = [
        {"period": b.period_key, "income": b.income, "expenses": b.expenses, "net": b.net}
        for b in report.buckets.values()
    ]
    for point, raw in zip(payload["forecast"], report.forecast):
        point["net_predicted"] = raw.net_predicted
    return payload
