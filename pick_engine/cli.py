"""
Pick Engine: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate payload files.
  4. Run the engine (scoring, prediction, daily cap, settlement).
  5. Report result to stdout, or write it with ``--out``.

Install and run::

    pip install -e .
    pick-engine --help
    pick-engine validate-config
    pick-engine score data/inputs/fixture.json
    pick-engine predict data/inputs/matchday.json --out data/outputs/predictions.json
    pick-engine daily-picks data/inputs/matchday.json --date 2026-10-18
    pick-engine settle data/outputs/predictions.json --home 2 --away 1
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="pick-engine",
    help="Football pick engine: scores markets and composes daily picks.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pick_engine.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from pick_engine.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_bundles_or_exit(payload_path: str):
    from pick_engine.ingestion.payload import PayloadError, load_bundles

    try:
        return load_bundles(Path(payload_path))
    except (FileNotFoundError, PayloadError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _apply_fixture_filter(bundles, config):
    from pick_engine.selection.fixture_filter import should_select_fixture

    kept = [
        b for b in bundles
        if should_select_fixture(b.event, b.sentiment, config.fixture_selection) is not None
    ]
    typer.echo(f"  Fixture filter: {len(kept)}/{len(bundles)} selected.")
    return kept


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    eng = config.engine

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  BANKER threshold: {eng.classification.banker_min_score}")
    typer.echo(f"  VALUE threshold:  {eng.classification.value_min_score}")
    typer.echo(f"  Daily cap:        {eng.daily_cap.max_picks} (min score {eng.daily_cap.min_score})")
    typer.echo(f"  Cap timezone:     {eng.daily_cap.timezone}")
    typer.echo(f"  Output dir:       {config.data.output_dir}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("score")
def score(
    payload_path: str = typer.Argument(..., help="Bundle JSON file."),
    event_id: Optional[int] = typer.Option(
        None,
        "--event-id",
        help="Event to score when the file holds several bundles (default: first).",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print the score breakdown of every catalogue candidate for one event."""
    from pick_engine.engine import score_all_markets

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    bundles = _load_bundles_or_exit(payload_path)

    if event_id is not None:
        bundles = [b for b in bundles if b.event.event_id == event_id]
        if not bundles:
            typer.echo(f"[ERROR] Event {event_id} not found in {payload_path}.", err=True)
            raise typer.Exit(code=1)
    bundle = bundles[0]

    scores = score_all_markets(bundle.event, bundle.sentiment, bundle.forecast, config.engine)
    typer.echo(f"{bundle.event.title} (event {bundle.event.event_id})")
    if not scores:
        typer.echo("  No forecast probabilities; nothing to score.")
        return

    typer.echo(
        f"  {'market':<14} {'selection':<10} {'score':>5}  "
        f"{'fcst':>5} {'mkt':>5}  blocked"
    )
    for s in scores:
        mkt = f"{s.market_probability:.2f}" if s.market_probability is not None else "  -  "
        blocked = s.block_reason or ("yes" if s.blocked_as_primary else "")
        typer.echo(
            f"  {s.market_type.value:<14} {s.selection:<10} {s.final_score:>5}  "
            f"{s.forecast_probability:>5.2f} {mkt:>5}  {blocked}"
        )


@app.command("predict")
def predict(
    payload_path: str = typer.Argument(..., help="Bundle JSON file (one bundle or a list)."),
    out: Optional[str] = typer.Option(
        None,
        "--out",
        help="Write predictions JSON here instead of printing it.",
    ),
    select_fixtures: bool = typer.Option(
        False,
        "--select-fixtures",
        help="Skip events that fail the big-team / market-confidence filter.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Generate a prediction for every bundle in PAYLOAD_PATH."""
    from pick_engine.engine import generate_prediction
    from pick_engine.reporting.export import export_predictions_json, predictions_to_records

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    bundles = _load_bundles_or_exit(payload_path)
    if select_fixtures:
        bundles = _apply_fixture_filter(bundles, config)

    predictions = [
        generate_prediction(b.event, b.sentiment, b.forecast, config.engine)
        for b in bundles
    ]

    if out:
        path = export_predictions_json(predictions, Path(out))
        typer.echo(f"[OK] Wrote {len(predictions)} prediction(s) to {path}")
        return
    typer.echo(json.dumps(predictions_to_records(predictions), indent=2))


@app.command("daily-picks")
def daily_picks(
    payload_path: str = typer.Argument(..., help="Bundle JSON file (a list of bundles)."),
    day: Optional[str] = typer.Option(
        None,
        "--date",
        help="Only report this kickoff day (YYYY-MM-DD, cap timezone).",
    ),
    out_json: Optional[str] = typer.Option(None, "--out-json", help="Write capped picks as JSON."),
    out_csv: Optional[str] = typer.Option(None, "--out-csv", help="Write capped picks as CSV."),
    select_fixtures: bool = typer.Option(
        False,
        "--select-fixtures",
        help="Skip events that fail the big-team / market-confidence filter.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Predict every bundle, then keep the top picks of each kickoff day."""
    from pick_engine.engine import apply_daily_cap_by_day, generate_prediction
    from pick_engine.models.prediction import DailyCandidate
    from pick_engine.reporting.export import export_predictions_csv, export_predictions_json
    from pick_engine.utils.time_utils import parse_date

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_day = None
    if day:
        try:
            target_day = parse_date(day)
        except ValueError:
            typer.echo(f"[ERROR] Invalid --date '{day}'. Use YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1)

    bundles = _load_bundles_or_exit(payload_path)
    if select_fixtures:
        bundles = _apply_fixture_filter(bundles, config)

    candidates = [
        DailyCandidate.from_prediction(
            b.event, generate_prediction(b.event, b.sentiment, b.forecast, config.engine)
        )
        for b in bundles
    ]
    by_day = apply_daily_cap_by_day(candidates, config.engine)
    if target_day is not None:
        by_day = {target_day: by_day.get(target_day, [])}

    kept = []
    for d, picks in by_day.items():
        typer.echo(f"{d.isoformat()}: {len(picks)} pick(s)")
        for c in picks:
            p = c.prediction
            typer.echo(
                f"  [{p.category.value:<6}] {c.event.title:<40} "
                f"{p.primary.market_type.value} {p.primary.selection} ({c.top_score})"
            )
        kept.extend(c.prediction for c in picks)

    if out_json:
        path = export_predictions_json(kept, Path(out_json))
        typer.echo(f"  JSON -> {path}")
    if out_csv:
        path = export_predictions_csv(kept, Path(out_csv))
        typer.echo(f"  CSV  -> {path}")
    typer.echo(f"[OK] {len(kept)} pick(s) across {len(by_day)} day(s).")


@app.command("settle")
def settle(
    predictions_path: str = typer.Argument(..., help="Predictions JSON written by 'predict --out'."),
    home: Optional[int] = typer.Option(None, "--home", min=0, help="Home goals."),
    away: Optional[int] = typer.Option(None, "--away", min=0, help="Away goals."),
    event_id: Optional[int] = typer.Option(
        None,
        "--event-id",
        help="Prediction to settle with --home/--away when the file holds several.",
    ),
    results_path: Optional[str] = typer.Option(
        None,
        "--results",
        help='JSON list of {"event_id", "home", "away"} to settle a whole file.',
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Grade predictions against final scores and print the results."""
    from pick_engine.ingestion.payload import PayloadError, load_predictions
    from pick_engine.models.settlement import FinalScore
    from pick_engine.settlement.grader import settle_prediction
    from pick_engine.settlement.stats import aggregate

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        predictions = load_predictions(Path(predictions_path))
    except (FileNotFoundError, PayloadError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    scores: dict[int, FinalScore] = {}
    if results_path:
        try:
            rows = json.loads(Path(results_path).read_text(encoding="utf-8"))
            scores = {
                int(r["event_id"]): FinalScore(home=r["home"], away=r["away"])
                for r in rows
            }
        except FileNotFoundError:
            typer.echo(f"[ERROR] Results file not found: {results_path}", err=True)
            raise typer.Exit(code=1)
        except (ValueError, KeyError, TypeError) as exc:
            typer.echo(f"[ERROR] Invalid results file: {exc}", err=True)
            raise typer.Exit(code=1)
    elif home is not None and away is not None:
        if event_id is None:
            if len(predictions) != 1:
                typer.echo(
                    "[ERROR] File holds several predictions; pass --event-id or --results.",
                    err=True,
                )
                raise typer.Exit(code=1)
            event_id = predictions[0].event_id
        scores = {event_id: FinalScore(home=home, away=away)}
    else:
        typer.echo("[ERROR] Pass --home and --away, or --results.", err=True)
        raise typer.Exit(code=1)

    settled = [
        settle_prediction(p, scores[p.event_id])
        for p in predictions
        if p.event_id in scores
    ]
    if not settled:
        typer.echo("[ERROR] No prediction matches the given results.", err=True)
        raise typer.Exit(code=1)

    for pick in settled:
        typer.echo(
            f"  event {pick.event_id}: {pick.market_type.value} {pick.selection} "
            f"@ {pick.final_score.home}-{pick.final_score.away} -> {pick.result.value}"
        )
    stats = aggregate(settled)
    typer.echo(
        f"[OK] Settled {stats.overall.total} | wins={stats.overall.wins} "
        f"losses={stats.overall.losses} voids={stats.overall.voids} "
        f"win_rate={stats.overall.win_rate:.0%}"
    )


if __name__ == "__main__":
    app()
