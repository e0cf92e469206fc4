from __future__ import annotations

import dataclasses

import structlog

from finsight_core.domain.models import ForecastingSession

logger = structlog.get_logger()

RETRAIN_STEP = 0.05
RETRAIN_CEILING = 0.95


def retrain(
    session: ForecastingSession,
    step: float = RETRAIN_STEP,
    ceiling: float = RETRAIN_CEILING,
) -> ForecastingSession:
    """Return the session after one retrain: confidence nudged up by `step`, capped at `ceiling`."""
    confidence = round(min(ceiling, session.confidence + step), 4)
    updated = dataclasses.replace(session, confidence=confidence, runs=session.runs + 1)
    logger.info("session_retrained", confidence=updated.confidence, runs=updated.runs)
    return updated
