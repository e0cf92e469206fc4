import json
from pathlib import Path

from typer.testing import CliRunner

from finsight_core.cli import app


runner = CliRunner()


def _ledger(tmp_path: Path) -> Path:
    ledger_path = tmp_path / "ledger.csv"
    fixture = Path(__file__).parent / "data" / "ledger.csv"
    ledger_path.write_text(fixture.read_text())
    return ledger_path


def test_cli_analyze_forecast_and_retrain(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    session_path = tmp_path / "session.json"
    forecast_path = tmp_path / "forecast.json"
    report_path = tmp_path / "report.json"

    result_retrain = runner.invoke(app, ["retrain", "--session", str(session_path)])
    assert result_retrain.exit_code == 0, result_retrain.stdout
    assert json.loads(session_path.read_text()) == {"confidence": 0.9, "runs": 1}

    result_forecast = runner.invoke(
        app,
        [
            "forecast",
            "--ledger",
            str(ledger_path),
            "--months",
            "3",
            "--session",
            str(session_path),
            "--out",
            str(forecast_path),
        ],
    )
    assert result_forecast.exit_code == 0, result_forecast.stdout
    payload = json.loads(forecast_path.read_text())
    assert payload["confidence"] == 0.9
    assert [p["period"] for p in payload["forecast"]] == ["2025-01", "2025-02", "2025-03"]
    confidences = [p["confidence"] for p in payload["forecast"]]
    assert confidences == sorted(confidences, reverse=True)

    result_analyze = runner.invoke(
        app,
        ["analyze", "--ledger", str(ledger_path), "--out", str(report_path)],
    )
    assert result_analyze.exit_code == 0, result_analyze.stdout
    report = json.loads(report_path.read_text())
    assert len(report["buckets"]) == 12
    assert report["expense_anomalies"][0]["period_key"] == "2024-09"


def test_cli_reports(tmp_path: Path):
    ledger_path = _ledger(tmp_path)

    result_buckets = runner.invoke(app, ["buckets", "--ledger", str(ledger_path)])
    assert result_buckets.exit_code == 0
    assert "2024-09" in result_buckets.stdout

    result_anomalies = runner.invoke(app, ["anomalies", "--ledger", str(ledger_path)])
    assert result_anomalies.exit_code == 0
    assert "2024-09" in result_anomalies.stdout

    result_recommend = runner.invoke(app, ["recommend", "--ledger", str(ledger_path)])
    assert result_recommend.exit_code == 0
    assert "Unusual Spending Month" in result_recommend.stdout

    result_trend = runner.invoke(app, ["trend", "--ledger", str(ledger_path), "--field", "balance"])
    assert result_trend.exit_code != 0


def test_cli_forecast_zero_months_is_not_a_history_problem(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    forecast_path = tmp_path / "forecast.json"

    result = runner.invoke(
        app,
        ["forecast", "--ledger", str(ledger_path), "--months", "0", "--out", str(forecast_path)],
    )
    assert result.exit_code == 0, result.stdout
    assert "Not enough history" not in result.stdout
    assert json.loads(forecast_path.read_text())["forecast"] == []


def test_cli_analyze_options_override_config_file(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"threshold": 5.0, "periods_ahead": 2}))
    report_path = tmp_path / "report.json"

    result = runner.invoke(
        app,
        [
            "analyze",
            "--ledger",
            str(ledger_path),
            "--config",
            str(config_path),
            "--threshold",
            "2.0",
            "--out",
            str(report_path),
        ],
    )
    assert result.exit_code == 0, result.stdout
    report = json.loads(report_path.read_text())
    assert report["config"]["threshold"] == 2.0
    assert report["config"]["periods_ahead"] == 2
    assert len(report["forecast"]) == 2
    assert [a["period_key"] for a in report["expense_anomalies"]] == ["2024-09"]
