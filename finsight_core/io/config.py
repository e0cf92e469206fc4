from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from finsight_core.domain.models import AnalysisConfig, ForecastingSession


def load_analysis_config(path: str | Path) -> AnalysisConfig:
    data = _read_json(path)
    return AnalysisConfig(
        period=int(data.get("period", 12)),
        threshold=float(data.get("threshold", 2.0)),
        periods_ahead=int(data.get("periods_ahead", 6)),
        variance_ratio=float(data.get("variance_ratio", 0.1)),
        base_confidence=float(data.get("base_confidence", 0.85)),
    )


def load_session(path: str | Path) -> ForecastingSession:
    """Missing state file means a fresh session."""
    if not Path(path).exists():
        return ForecastingSession()
    data = _read_json(path)
    return ForecastingSession(
        confidence=float(data.get("confidence", 0.85)),
        runs=int(data.get("runs", 0)),
    )


def save_session(session: ForecastingSession, path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump({"confidence": session.confidence, "runs": session.runs}, f, indent=2)
    return target


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
