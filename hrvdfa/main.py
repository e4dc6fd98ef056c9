from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from hrvdfa.config import load_config
from hrvdfa.core.history import Alpha1History
from hrvdfa.core.monitor import Alpha1Monitor
from hrvdfa.data.heart_rate import MalformedPacketError, decode_heart_rate_measurement
from hrvdfa.data.replay import iter_measurements, load_rr_file
from hrvdfa.utils.logging import setup_logging


app = typer.Typer(add_completion=False)


@app.command()
def replay(
    rr_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV / text file of RR intervals in ms"),
    batch_size: int = typer.Option(1, min=1, help="Beats per simulated sensor notification"),
    config: Optional[Path] = typer.Option(None, help="YAML config overriding the defaults"),
    log_level: Optional[str] = typer.Option(None, help="Overrides LOG_LEVEL"),
) -> None:
    """Replay a recorded RR file through the alpha1 engine.

    Prints one line per stored history point (throttled the same way a live
    chart would be) and a summary at the end.
    """
    try:
        cfg = load_config(config)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    setup_logging(log_level or cfg.env.LOG_LEVEL, cfg.env.LOG_FORMAT)

    try:
        rr = load_rr_file(rr_file)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Could not read {rr_file}: {exc}", err=True)
        raise typer.Exit(code=1)

    history = Alpha1History(min_interval_ms=cfg.runtime.history.min_interval_ms)
    monitor = Alpha1Monitor(cfg)
    for measurement in iter_measurements(rr, batch_size=batch_size):
        reading = monitor.process(measurement)
        if reading.fresh and history.record(reading):
            zone = reading.zone.value if reading.zone else "--"
            typer.echo(
                f"t={reading.timestamp / 1000.0:8.1f}s hr={reading.heart_rate:3d} "
                f"alpha1={reading.alpha1:.3f} zone={zone}"
            )

    stats = history.stats()
    if stats.count == 0:
        typer.echo(f"No alpha1 value: {len(rr)} beats, need {cfg.runtime.window.window_width}.")
        return
    typer.echo(
        f"points={stats.count} mean={stats.mean_alpha1:.3f} "
        f"min={stats.min_alpha1:.3f} max={stats.max_alpha1:.3f} zones={stats.per_zone}"
    )


@app.command()
def decode(packet_hex: str = typer.Argument(..., help="Heart Rate Measurement payload as hex")) -> None:
    """Decode one Heart Rate Measurement notification."""
    try:
        measurement = decode_heart_rate_measurement(bytes.fromhex(packet_hex))
    except (ValueError, MalformedPacketError) as exc:
        typer.echo(f"Invalid packet: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(
        json.dumps(
            {
                "heart_rate": measurement.heart_rate,
                "rr_intervals_ms": [round(v, 2) for v in measurement.rr_intervals],
            }
        )
    )


@app.command("config")
def show_config(config: Optional[Path] = typer.Option(None, help="YAML config to merge")) -> None:
    """Print the effective engine configuration."""
    try:
        cfg = load_config(config)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    typer.echo(cfg.runtime.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
