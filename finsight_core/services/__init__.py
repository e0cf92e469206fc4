from finsight_core.services.aggregator import aggregate  # noqa: F401
from finsight_core.services.anomaly import detect  # noqa: F401
from finsight_core.services.pipeline import analyze  # noqa: F401
from finsight_core.services.projector import forecast, project  # noqa: F401
from finsight_core.services.recommendations import recommend  # noqa: F401
from finsight_core.services.seasonal import decompose  # noqa: F401
from finsight_core.services.session import retrain  # noqa: F401
from finsight_core.services.stats import safe_divide  # noqa: F401
from finsight_core.services.trend import fit  # noqa: F401

__all__ = [
    "aggregate",
    "fit",
    "decompose",
    "detect",
    "project",
    "forecast",
    "recommend",
    "retrain",
    "analyze",
    "safe_divide",
]
