from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from typing import Dict, List, Mapping, Optional, Union


class RecordKind(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class RecommendationKind(str, enum.Enum):
    WARNING = "warning"
    ALERT = "alert"
    SUCCESS = "success"
    INFO = "info"


class Impact(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    POSITIVE = "positive"


@dataclasses.dataclass(frozen=True)
class Record:
    timestamp: Union[dt.date, dt.datetime, str]
    amount: Union[float, str]
    kind: str  # "income", "expense" or anything else (ignored in totals)
    category: str = ""


@dataclasses.dataclass(frozen=True)
class PeriodBucket:
    period_key: str  # "YYYY-MM"
    income: float = 0.0
    expenses: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expenses


@dataclasses.dataclass(frozen=True)
class TrendResult:
    slope: float
    intercept: float
    r2: Optional[float]  # None when the fit quality is undefined

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


@dataclasses.dataclass(frozen=True)
class SeasonalResult:
    trend: List[float]
    seasonal: List[float]
    residual: List[float]
    seasonal_pattern: List[float]

    @property
    def period(self) -> int:
        return len(self.seasonal_pattern)


@dataclasses.dataclass(frozen=True)
class AnomalyPoint:
    period_key: str
    value: float
    kind: RecordKind
    severity: Impact


@dataclasses.dataclass(frozen=True)
class Projection:
    step: int
    predicted: float
    lower: float
    upper: float
    confidence: float


@dataclasses.dataclass(frozen=True)
class ForecastPoint:
    period_label: str
    expenses_predicted: float
    income_predicted: float
    expenses_lower: float
    expenses_upper: float
    income_lower: float
    income_upper: float
    confidence: float

    @property
    def net_predicted(self) -> float:
        return self.income_predicted - self.expenses_predicted


MetricValue = Union[int, float, str]


@dataclasses.dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    title: str
    description: str
    impact: Impact
    actionable: bool
    rule: str
    metrics: Mapping[str, MetricValue] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, RecommendationKind):
            object.__setattr__(self, "kind", RecommendationKind(self.kind))
        if not isinstance(self.impact, Impact):
            object.__setattr__(self, "impact", Impact(self.impact))
        for key, value in self.metrics.items():
            if not isinstance(key, str):
                raise TypeError(f"Metric keys must be strings, got {key!r}")
            # bool is an int subclass but is not a metric value
            if isinstance(value, bool) or not isinstance(value, (int, float, str)):
                raise TypeError(f"Metric {key!r} must be a number or string, got {type(value).__name__}")
        object.__setattr__(self, "metrics", dict(self.metrics))


@dataclasses.dataclass(frozen=True)
class AnalysisConfig:
    period: int = 12
    threshold: float = 2.0
    periods_ahead: int = 6
    variance_ratio: float = 0.1
    base_confidence: float = 0.85

    def __post_init__(self) -> None:
        if self.period < 1:
            raise ValueError("period must be >= 1")
        if self.threshold < 0:
            raise ValueError("threshold must be >= 0")
        if self.periods_ahead < 0:
            raise ValueError("periods_ahead must be >= 0")
        if self.variance_ratio < 0:
            raise ValueError("variance_ratio must be >= 0")
        if not 0.0 <= self.base_confidence <= 1.0:
            raise ValueError("base_confidence must be within 0..1")


@dataclasses.dataclass(frozen=True)
class ForecastingSession:
    confidence: float = 0.85
    runs: int = 0


@dataclasses.dataclass
class AnalysisReport:
    config: AnalysisConfig
    session: ForecastingSession
    buckets: Dict[str, PeriodBucket]
    income_trend: Optional[TrendResult]
    expense_trend: Optional[TrendResult]
    net_trend: Optional[TrendResult]
    seasonal: SeasonalResult
    expense_anomalies: List[AnomalyPoint]
    income_anomalies: List[AnomalyPoint]
    forecast: List[ForecastPoint]
    recommendations: List[Recommendation]

    @property
    def periods(self) -> List[str]:
        return list(self.buckets.keys())
