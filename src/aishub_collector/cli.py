"""Command line interface for the AISHub collector."""

import signal
import typer
import structlog
from pathlib import Path
from typing import Optional

from .exceptions import FatalStartupError
from .ingestion.query_builder import build_query, redact_query
from .models.settings_manager import SettingsManager
from .orchestrator.ingestion_loop import CycleStatus, IngestionLoop
from .utils.logging import setup_logging

app = typer.Typer(
    name="aishub-collector",
    help="AISHub Collector: poll AISHub and keep per-vessel position files",
    add_completion=False
)

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def _install_stop_handlers(loop: IngestionLoop) -> None:
    """Route SIGINT and SIGTERM to a clean stop instead of KeyboardInterrupt."""
    def _handle(signum, frame):
        logger.info("Stop signal received", signal=signal.Signals(signum).name)
        loop.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


@app.command()
def collect(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config", "-c",
        help="Path to configuration file (YAML or JSON)"
    ),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    json_logs: bool = typer.Option(True, "--json-logs/--console-logs", help="Log format")
):
    """Poll AISHub and append vessel positions until stopped."""
    setup_logging(level=log_level, log_file=log_file, json_logs=json_logs)
    logger.info("Starting AISHub collector, press Ctrl+C to stop", config_path=str(config_path))

    loop = IngestionLoop(SettingsManager(config_path))
    _install_stop_handlers(loop)

    try:
        loop.run_forever()
    except FatalStartupError as e:
        typer.echo(f"Fatal: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def run_once(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config", "-c",
        help="Path to configuration file (YAML or JSON)"
    ),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Logging level"),
    json_logs: bool = typer.Option(True, "--json-logs/--console-logs", help="Log format")
):
    """Run a single polling cycle, e.g. from cron."""
    setup_logging(level=log_level, json_logs=json_logs)

    loop = IngestionLoop(SettingsManager(config_path))
    try:
        loop.start()
        report = loop.run_cycle()
    except FatalStartupError as e:
        typer.echo(f"Fatal: {e}", err=True)
        raise typer.Exit(1)
    finally:
        loop.client.close()

    typer.echo(
        f"Cycle {report.cycle}: {report.status.value}, "
        f"{report.records_written} written, {report.records_failed} failed"
    )
    if report.status != CycleStatus.PERSISTED:
        raise typer.Exit(2)


@app.command()
def check_config(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config", "-c",
        help="Path to configuration file (YAML or JSON)"
    )
):
    """Validate the configuration and show the AISHub query it produces."""
    setup_logging(level="WARNING", json_logs=False)

    try:
        settings = SettingsManager(config_path).load()
    except FatalStartupError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Query: {redact_query(build_query(settings))}")
    typer.echo(f"Output directory: {settings.output_directory}")
    typer.echo(f"Polling interval: {settings.polling_interval_seconds}s")


if __name__ == "__main__":
    app()
