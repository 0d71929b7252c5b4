"""
Battery report daemon main loop.

Runs two concurrent asyncio loops:
1. **Sample loop**: reads a raw battery reading via the Sampler, normalizes it
   into a BatterySample, checks it for critical conditions, and appends it to
   the in-memory SampleHistory.
2. **Report loop**: once the history holds enough samples, generates a
   BatteryReport from a snapshot and writes the report JSON and the sample
   CSV into the output directory.

Both loops are resilient: an exception in one iteration is logged and does not
crash the loop or affect the other loop. Graceful shutdown on SIGTERM/SIGINT
sets a shared asyncio.Event, allowing both loops to finish their current
iteration and then write one final report if any samples were recorded.

When the reading source is exhausted the sample loop stops on its own; the
report loop keeps running until shutdown. With clear_after_report enabled the
history is emptied after each periodic report that was written.

Structured JSON logging is used for all events. A HealthWriter instance
keeps the daemon status (last appended sample, last written report and its
health status and paths, source exhaustion) in a JSON status file.

CHANGELOG:
- 2026-10-19: Stop sampling on an exhausted source, optional history clear
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import signal
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from battery.src.alerts import check_sample
from battery.src.exporter import artifact_paths, export_to_csv, export_to_json
from battery.src.health import HealthWriter
from battery.src.normalizer import normalize
from battery.src.reporter import generate_report

if TYPE_CHECKING:
    from battery.src.history import SampleHistory
    from battery.src.models import BatteryReport
    from battery.src.sampler import Sampler

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging() -> None:
    """Configure structured JSON logging for the daemon.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry, ensure_ascii=False)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)


def _now_ms() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)


# ---------------------------------------------------------------------------
# Startup config and report summary logging
# ---------------------------------------------------------------------------


def log_config_summary(settings: object) -> None:
    """Log a config summary at startup.

    Args:
        settings: A BatterySettings instance (or any object with the same attrs).
    """
    logger.info(
        "Battery report daemon starting with config: "
        "capture_path=%s, sample_interval_s=%s, report_interval_s=%s, "
        "min_samples_for_report=%s, output_dir=%s, health_path=%s, "
        "clear_after_report=%s",
        settings.capture_path,  # type: ignore[attr-defined]
        settings.sample_interval_s,  # type: ignore[attr-defined]
        settings.report_interval_s,  # type: ignore[attr-defined]
        settings.min_samples_for_report,  # type: ignore[attr-defined]
        settings.output_dir,  # type: ignore[attr-defined]
        settings.health_path,  # type: ignore[attr-defined]
        settings.clear_after_report,  # type: ignore[attr-defined]
    )


def log_report_summary(report: BatteryReport) -> None:
    """Log the headline figures of a generated report."""
    logger.info(
        "Battery report: duration_h=%s, avg_level=%s%%, "
        "temp_range=%s-%s C, charging_cycles=%s, "
        "consumption_rate=%s%%/h, degradation=%s%%, health=%s",
        report.monitoring_duration_hours,
        report.average_battery_level,
        report.min_temperature,
        report.max_temperature,
        report.charging_cycles,
        report.power_consumption_rate,
        report.battery_degradation,
        report.health_status.name,
    )
    for recommendation in report.recommendations:
        logger.info("Recommendation: %s", recommendation)


# ---------------------------------------------------------------------------
# Single-iteration functions (easily testable)
# ---------------------------------------------------------------------------


async def _sample_once(
    *,
    sampler: Sampler,
    history: SampleHistory,
    health: HealthWriter | None,
) -> None:
    """Execute a single sample-normalize-append cycle.

    Catches all exceptions so that the caller's loop is never broken.
    The health writer is only updated when a sample was appended.

    Args:
        sampler: The raw reading sampler.
        history: The sample history to append to.
        health: HealthWriter instance, or None to skip status writes.
    """
    try:
        raw = await sampler.sample()

        if raw is not None:
            sample = normalize(raw, ts_ms=_now_ms())

            if sample is not None:
                history.append(sample)
                if health is not None:
                    try:
                        health.record_sample(len(history))
                    except Exception:
                        logger.warning("Failed to write health file", exc_info=True)
                logger.info(
                    "Sample: level=%s%% temp=%sC voltage=%smV charging=%s method=%s",
                    sample.level,
                    sample.temperature,
                    sample.voltage,
                    sample.is_charging,
                    sample.charging_method.name,
                )
                alert = check_sample(sample)
                if alert is not None:
                    logger.warning("Battery alert: %s", alert)
            else:
                logger.warning("Normalizer returned None, skipping append")
        elif sampler.exhausted is not True:
            logger.warning("Sampler returned None, skipping normalize and append")
    except Exception:
        logger.error("Sample cycle error", exc_info=True)


async def _report_once(
    *,
    history: SampleHistory,
    output_dir: str | Path,
    min_samples: int,
    health: HealthWriter | None = None,
    clear_history: bool = False,
) -> bool:
    """Execute a single report cycle.

    Skips the cycle when fewer than *min_samples* samples are recorded.
    Catches all exceptions so that the caller's loop is never broken.

    Args:
        history: The sample history to report on.
        output_dir: Directory receiving the JSON and CSV artifacts.
        min_samples: Minimum history size required to report.
        health: HealthWriter instance, or None to skip status writes.
        clear_history: Empty the history once both artifacts are written.

    Returns:
        True if both artifacts were written, False otherwise.
    """
    try:
        samples = history.snapshot()
        if len(samples) < min_samples:
            logger.debug(
                "Skipping report: %d samples recorded, %d required",
                len(samples),
                min_samples,
            )
            return False

        report = generate_report(samples)
        json_path, csv_path = artifact_paths(output_dir, _now_ms())
        json_ok = export_to_json(report, json_path)
        csv_ok = export_to_csv(samples, csv_path)

        if not (json_ok and csv_ok):
            logger.error("Failed to save report to %s", output_dir)
            return False

        logger.info("Report saved to %s", output_dir)
        log_report_summary(report)
        if clear_history:
            history.clear()
            logger.info("Sample history cleared after report")
        if health is not None:
            try:
                health.record_report(report, json_path, csv_path)
                if clear_history:
                    health.record_history_cleared()
            except Exception:
                logger.warning("Failed to write health file", exc_info=True)
        return True
    except Exception:
        logger.error("Report cycle error", exc_info=True)
        return False


# ---------------------------------------------------------------------------
# Loop runners
# ---------------------------------------------------------------------------


async def _sample_loop(
    *,
    sampler: Sampler,
    history: SampleHistory,
    sample_interval_s: float,
    shutdown_event: asyncio.Event,
    health: HealthWriter | None,
) -> None:
    """Run the sample loop until shutdown_event is set or the source is exhausted."""
    logger.info("Sample loop started (interval=%ss)", sample_interval_s)
    while not shutdown_event.is_set():
        await _sample_once(sampler=sampler, history=history, health=health)
        if sampler.exhausted is True:
            logger.info("Sample loop stopping: source exhausted")
            if health is not None:
                try:
                    health.record_source_exhausted()
                except Exception:
                    logger.warning("Failed to write health file", exc_info=True)
            break
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(
                shutdown_event.wait(),
                timeout=sample_interval_s,
            )
    logger.info("Sample loop stopped")


async def _report_loop(
    *,
    history: SampleHistory,
    output_dir: str | Path,
    min_samples: int,
    report_interval_s: float,
    shutdown_event: asyncio.Event,
    health: HealthWriter | None = None,
    clear_history: bool = False,
) -> None:
    """Run the report loop until shutdown_event is set."""
    logger.info("Report loop started (interval=%ss)", report_interval_s)
    while not shutdown_event.is_set():
        await _report_once(
            history=history,
            output_dir=output_dir,
            min_samples=min_samples,
            health=health,
            clear_history=clear_history,
        )
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(
                shutdown_event.wait(),
                timeout=report_interval_s,
            )
    logger.info("Report loop stopped")


# ---------------------------------------------------------------------------
# Concurrent runner with graceful shutdown
# ---------------------------------------------------------------------------


async def run_loops(
    *,
    sampler: Sampler,
    history: SampleHistory,
    output_dir: str | Path,
    sample_interval_s: float,
    report_interval_s: float,
    min_samples: int,
    shutdown_event: asyncio.Event,
    health: HealthWriter | None = None,
    clear_after_report: bool = False,
) -> None:
    """Run sample and report loops concurrently until shutdown.

    When the shutdown_event is set, both loops finish their current
    iteration, then a final report is written if any samples exist.

    Args:
        sampler: The raw reading sampler.
        history: The shared sample history.
        output_dir: Directory receiving report artifacts.
        sample_interval_s: Seconds between sample cycles.
        report_interval_s: Seconds between report cycles.
        min_samples: Minimum history size for periodic reports.
        shutdown_event: Event to signal graceful shutdown.
        health: HealthWriter instance, or None to skip status writes.
        clear_after_report: Empty the history after each periodic report.
            The final report on shutdown leaves the history intact.
    """
    logger.info("Starting concurrent sample and report loops")

    await asyncio.gather(
        _sample_loop(
            sampler=sampler,
            history=history,
            sample_interval_s=sample_interval_s,
            shutdown_event=shutdown_event,
            health=health,
        ),
        _report_loop(
            history=history,
            output_dir=output_dir,
            min_samples=min_samples,
            report_interval_s=report_interval_s,
            shutdown_event=shutdown_event,
            health=health,
            clear_history=clear_after_report,
        ),
    )

    if len(history) > 0:
        logger.info("Writing final report before exit")
        await _report_once(
            history=history,
            output_dir=output_dir,
            min_samples=1,
            health=health,
        )
    logger.info("Shutdown complete")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


async def async_main() -> None:
    """Async entrypoint: load config, build components, run loops.

    Sets up SIGTERM/SIGINT handlers to trigger graceful shutdown.
    """
    configure_logging()

    from battery.src.config import BatterySettings
    from battery.src.history import SampleHistory
    from battery.src.sampler import CaptureFileSource, Sampler

    settings = BatterySettings()
    log_config_summary(settings)

    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: _handle_signal(shutdown_event),
        )

    source = CaptureFileSource(settings.capture_path)
    try:
        await run_loops(
            sampler=Sampler(source, shutdown_event=shutdown_event),
            history=SampleHistory(),
            output_dir=settings.output_dir,
            sample_interval_s=settings.sample_interval_s,
            report_interval_s=settings.report_interval_s,
            min_samples=settings.min_samples_for_report,
            shutdown_event=shutdown_event,
            health=HealthWriter(settings.health_path),
            clear_after_report=settings.clear_after_report,
        )
    finally:
        source.close()


def _handle_signal(shutdown_event: asyncio.Event) -> None:
    """Handle SIGTERM/SIGINT by setting the shutdown event."""
    logger.info("Received shutdown signal, initiating graceful shutdown")
    shutdown_event.set()


def main() -> None:
    """Synchronous entrypoint for the battery report daemon."""
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
