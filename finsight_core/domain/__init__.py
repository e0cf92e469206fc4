from finsight_core.domain.models import (  # noqa: F401
    AnalysisConfig,
    AnalysisReport,
    AnomalyPoint,
    ForecastingSession,
    ForecastPoint,
    Impact,
    PeriodBucket,
    Projection,
    Recommendation,
    RecommendationKind,
    Record,
    RecordKind,
    SeasonalResult,
    TrendResult,
)

__all__ = [
    "AnalysisConfig",
    "AnalysisReport",
    "AnomalyPoint",
    "ForecastingSession",
    "ForecastPoint",
    "Impact",
    "PeriodBucket",
    "Projection",
    "Recommendation",
    "RecommendationKind",
    "Record",
    "RecordKind",
    "SeasonalResult",
    "TrendResult",
]
