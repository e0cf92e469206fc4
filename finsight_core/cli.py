from __future__ import annotations

import dataclasses
import json
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.table import Table

from finsight_core.domain.models import AnalysisConfig, ForecastingSession, RecordKind
from finsight_core.io import config as config_io
from finsight_core.io import ledger as ledger_io
from finsight_core.services import aggregator, anomaly, pipeline, projector, recommendations, seasonal, trend
from finsight_core.services import session as session_service

app = typer.Typer(help="Finsight CLI for monthly trends, anomalies, forecasts and advice.")
console = Console()


@app.callback()
def main():
    # log lines go to stderr, JSON output stays on stdout; resolve sys.stderr per logger so redirected streams are honoured
    structlog.configure(logger_factory=lambda *args: structlog.PrintLogger(sys.stderr))


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _emit(payload, out: Optional[Path], label: str):
    if out:
        _save_json(out, payload)
        typer.echo(f"{label} written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


def _load_buckets(ledger: Path):
    return aggregator.aggregate(ledger_io.load_ledger(ledger))


def _load_session(path: Optional[Path]) -> Optional[ForecastingSession]:
    return config_io.load_session(path) if path else None


@app.command()
def buckets(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,category]"),
):
    """Show monthly income, expenses and net."""
    data = _load_buckets(ledger)
    if not data:
        console.print("[yellow]No usable records in ledger.[/yellow]")
        return
    table = Table(title="Monthly buckets")
    table.add_column("Month")
    table.add_column("Income", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("Net", justify="right")
    for key, bucket in data.items():
        colour = "green" if bucket.net >= 0 else "red"
        table.add_row(key, f"{bucket.income:,.2f}", f"{bucket.expenses:,.2f}", f"[{colour}]{bucket.net:,.2f}[/{colour}]")
    console.print(table)


@app.command("trend")
def trend_cmd(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,category]"),
    field: str = typer.Option("expenses", help="Series to fit: income|expenses|net"),
):
    """Fit a linear trend to one monthly series."""
    try:
        values = aggregator.series(_load_buckets(ledger), field)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    result = trend.fit(values)
    if result is None:
        typer.echo(json.dumps({"field": field, "points": len(values), "trend": None}, indent=2))
        return
    typer.echo(
        json.dumps(
            {
                "field": field,
                "points": len(values),
                "trend": {"slope": result.slope, "intercept": result.intercept, "r2": result.r2},
            },
            indent=2,
        )
    )


@app.command()
def anomalies(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,category]"),
    threshold: float = typer.Option(2.0, help="z-score cutoff"),
):
    """Flag months whose income or expenses are statistical outliers."""
    data = _load_buckets(ledger)
    found = []
    for kind, field in ((RecordKind.EXPENSE, "expenses"), (RecordKind.INCOME, "income")):
        idx = anomaly.detect(aggregator.series(data, field), threshold)
        found.extend(anomaly.describe(idx, data, kind))
    if not found:
        console.print("[green]No anomalies detected.[/green]")
        return
    for point in found:
        console.print(
            f"[bold]{point.period_key}[/bold] {point.kind.value}: {point.value:,.2f} "
            f"([yellow]{point.severity.value}[/yellow])"
        )


@app.command("forecast")
def forecast_cmd(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,category]"),
    months: int = typer.Option(6, help="Months to forecast"),
    variance_ratio: float = typer.Option(0.1, help="Band width as a share of the prediction"),
    session: Optional[Path] = typer.Option(None, help="Session state JSON (confidence)"),
    out: Optional[Path] = typer.Option(None, help="Output path for forecast JSON"),
):
    """Project income and expenses forward along their linear trends."""
    state = _load_session(session) or ForecastingSession()
    data = _load_buckets(ledger)
    points = projector.forecast(
        data,
        periods_ahead=months,
        variance_ratio=variance_ratio,
        base_confidence=state.confidence,
    )
    if months > 0 and len(data) < projector.MIN_HISTORY:
        console.print(
            f"[yellow]Not enough history to forecast (need at least {projector.MIN_HISTORY} months).[/yellow]"
        )
    payload = {
        "confidence": state.confidence,
        "forecast": [
            {
                "period": p.period_label,
                "income": p.income_predicted,
                "income_lower": p.income_lower,
                "income_upper": p.income_upper,
                "expenses": p.expenses_predicted,
                "expenses_lower": p.expenses_lower,
                "expenses_upper": p.expenses_upper,
                "net": p.net_predicted,
                "confidence": p.confidence,
            }
            for p in points
        ],
    }
    _emit(payload, out, "Forecast")


@app.command()
def recommend(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,category]"),
    period: int = typer.Option(12, help="Seasonal cycle length in months"),
    threshold: float = typer.Option(2.0, help="z-score cutoff for unusual months"),
):
    """Print rule-based recommendations."""
    data = _load_buckets(ledger)
    expenses = aggregator.series(data, "expenses")
    recs = recommendations.recommend(
        data,
        seasonal.decompose(expenses, period),
        anomaly.detect(expenses, threshold),
    )
    if not recs:
        console.print("[yellow]Not enough data for recommendations.[/yellow]")
        return
    colours = {"warning": "red", "alert": "yellow", "success": "green", "info": "cyan"}
    for rec in recs:
        colour = colours[rec.kind.value]
        console.print(f"[{colour}]{rec.title}[/{colour}] ({rec.impact.value} impact)")
        console.print(f"  {rec.description}")


@app.command()
def analyze(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,category]"),
    config: Optional[Path] = typer.Option(None, help="Analysis config JSON"),
    period: Optional[int] = typer.Option(None, help="Seasonal cycle length in months (overrides config)"),
    threshold: Optional[float] = typer.Option(None, help="z-score cutoff for anomalies (overrides config)"),
    months: Optional[int] = typer.Option(None, help="Months to forecast (overrides config)"),
    session: Optional[Path] = typer.Option(None, help="Session state JSON (confidence)"),
    out: Optional[Path] = typer.Option(None, help="Output path for the full report JSON"),
):
    """Run the whole analysis and write a JSON report."""
    cfg = config_io.load_analysis_config(config) if config else AnalysisConfig()
    overrides = {"period": period, "threshold": threshold, "periods_ahead": months}
    try:
        cfg = dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    report = pipeline.analyze(ledger_io.load_ledger(ledger), cfg, _load_session(session))
    _emit(pipeline.report_to_dict(report), out, "Report")


@app.command()
def retrain(
    session: Path = typer.Option(..., help="Session state JSON; created if missing"),
):
    """Nudge the forecast confidence upward and store the new session."""
    current = config_io.load_session(session)
    updated = session_service.retrain(current)
    config_io.save_session(updated, session)
    typer.echo(f"Confidence {current.confidence:.2f} -> {updated.confidence:.2f} (runs: {updated.runs})")


if __name__ == "__main__":
    app()
