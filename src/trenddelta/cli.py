from __future__ import annotations

"""Command line interface for trenddelta using Typer."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import io
import json
import logging

import typer
from pydantic import ValidationError

from .config import OUTPUT_FORMATS, Settings, load_settings
from .core.delta import TrendDeltaQuery, run_trend_delta
from .core.intervals import interval_by_name, interval_names
from .core.ranges import TIME_RANGES
from .core.tables import IntervalTable
from .export.writers import format_table, save, write_csv, write_json
from .ingest import FileTrendProvider, ProviderFailure
from .types import ElementRef
from .utils.logging import get_logger
from .utils.timeparse import parse_instant

app = typer.Typer(help="Calendar interval deltas of exported trend data")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys[:-1]:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)
    if not hasattr(current, keys[-1]):
        raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


def _parse_now(now: Optional[str]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    try:
        return parse_instant(now)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--now") from exc


def _run(
    cfg: Settings,
    dma_id: int,
    element_id: int,
    parameter_id: int,
    time_range: Optional[str],
    interval: Optional[str],
    now: Optional[str],
    debug: bool,
) -> IntervalTable:
    query = TrendDeltaQuery(
        element=ElementRef(dma_id, element_id),
        parameter_id=parameter_id,
        time_range=time_range,
        interval=interval,
    )
    provider = FileTrendProvider.from_settings(cfg)
    try:
        return run_trend_delta(query, provider, settings=cfg, now=_parse_now(now))
    except ProviderFailure as exc:
        if debug:
            logger.exception("Trend delta query failed")
            raise
        typer.secho(f"error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. calendar.timezone=Europe/Brussels",
    ),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (OSError, TypeError, json.JSONDecodeError, ValidationError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            value = _parse_override_value(raw_value)
            _apply_override(data, keys, value)
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    get_logger("trenddelta", settings.logging.level)
    ctx.obj = settings


@app.command()
def delta(
    ctx: typer.Context,
    dma_id: int = typer.Argument(..., help="DataMiner agent ID"),
    element_id: int = typer.Argument(..., help="Element ID"),
    parameter_id: int = typer.Argument(..., help="Parameter ID"),
    time_range: Optional[str] = typer.Option(None, "--time-range", "-r", help="All time, Last day, Last week, Last month or Last year"),
    interval: Optional[str] = typer.Option(None, "--interval", "-i", help="Hour, Day, Week, Month or Year"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference instant for relative ranges (default: current time)"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help=f"Output format: {', '.join(OUTPUT_FORMATS)}"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result to this file"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on failure"),
) -> None:
    """Report start value, end value and delta per complete calendar interval."""

    cfg: Settings = ctx.obj
    fmt = (fmt or cfg.output.format).lower()
    if fmt not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"format must be one of {', '.join(OUTPUT_FORMATS)}", param_hint="--format")
    if output is None and cfg.output.path:
        output = Path(cfg.output.path)
    if fmt == "npz" and output is None:
        raise typer.BadParameter("npz output requires --output", param_hint="--output")

    table = _run(cfg, dma_id, element_id, parameter_id, time_range, interval, now, debug)

    if output is not None:
        if fmt == "table":
            output.write_text("\n".join(format_table(table)) + "\n", encoding="utf8")
        else:
            save(table, output, fmt)
        typer.echo(f"Wrote {len(table)} interval(s) to {output}")
        return

    if fmt in {"csv", "json"}:
        buffer = io.StringIO()
        (write_csv if fmt == "csv" else write_json)(table, buffer)
        typer.echo(buffer.getvalue(), nl=False)
    else:
        for line in format_table(table):
            typer.echo(line)


@app.command()
def ranges(
    ctx: typer.Context,
    now: Optional[str] = typer.Option(None, "--now", help="Reference instant (default: current time)"),
) -> None:
    """Show every named time range resolved against ``--now``."""

    cfg: Settings = ctx.obj
    reference = _parse_now(now)
    tz = cfg.calendar.tzinfo()
    for time_range in TIME_RANGES:
        bounds = time_range.resolve(reference, tz)
        marker = "*" if time_range.name == cfg.query.time_range else " "
        typer.echo(f"{marker} {time_range.name:<10}  {bounds.start.isoformat()}  {bounds.end.isoformat()}")


@app.command()
def intervals(ctx: typer.Context) -> None:
    """List interval names, marking the configured default."""

    cfg: Settings = ctx.obj
    default = interval_by_name(cfg.query.interval).display_name
    for name in interval_names():
        typer.echo(f"{'*' if name == default else ' '} {name}")


@app.command()
def plot(
    ctx: typer.Context,
    dma_id: int = typer.Argument(..., help="DataMiner agent ID"),
    element_id: int = typer.Argument(..., help="Element ID"),
    parameter_id: int = typer.Argument(..., help="Parameter ID"),
    time_range: Optional[str] = typer.Option(None, "--time-range", "-r"),
    interval: Optional[str] = typer.Option(None, "--interval", "-i"),
    now: Optional[str] = typer.Option(None, "--now"),
    save_path: Optional[Path] = typer.Option(None, "--save", help="Path to save the figure"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on failure"),
) -> None:
    """Plot the per-interval deltas as a bar chart."""

    cfg: Settings = ctx.obj
    table = _run(cfg, dma_id, element_id, parameter_id, time_range, interval, now, debug)

    from .viz.plot_deltas import plot_deltas, save_or_show

    ax = plot_deltas(table, title=f"Parameter {parameter_id} on {dma_id}/{element_id}")
    save_or_show(ax.figure, save_path)
    if save_path:
        typer.echo(f"Saved plot of {len(table)} interval(s) to {save_path}")


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
