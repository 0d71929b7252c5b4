"""
Artifact writers for battery reports and raw sample dumps.

- export_to_json(report, path): pretty-printed JSON mirroring the report fields.
- export_to_csv(samples, path): header row plus one row per sample, in the
  order given.

Both create missing parent directories and never raise on I/O failure: the
error is logged and ``False`` is returned so the caller's loop keeps running.

CHANGELOG:
- 2026-10-19: Catch TypeError and ValueError from invalid paths
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

from battery.src.models import BatteryReport, BatterySample

logger = logging.getLogger(__name__)

CSV_HEADER: tuple[str, ...] = (
    "Timestamp",
    "Level",
    "Health",
    "Temperature",
    "Voltage",
    "IsCharging",
    "ChargingMethod",
)

REPORT_FILE_TEMPLATE = "battery_report_{ts}.json"
DATA_FILE_TEMPLATE = "battery_data_{ts}.csv"


def artifact_paths(output_dir: str | Path, ts_ms: int) -> tuple[Path, Path]:
    """Return the ``(json_path, csv_path)`` pair for a report taken at *ts_ms*."""
    base = Path(output_dir)
    return (
        base / REPORT_FILE_TEMPLATE.format(ts=ts_ms),
        base / DATA_FILE_TEMPLATE.format(ts=ts_ms),
    )


def _csv_row(sample: BatterySample) -> list[str | int | float]:
    return [
        sample.timestamp,
        sample.level,
        sample.health.name,
        sample.temperature,
        sample.voltage,
        "true" if sample.is_charging else "false",
        sample.charging_method.name,
    ]


def export_to_json(report: BatteryReport, path: str | Path) -> bool:
    """Write *report* as indented JSON to *path*.

    Args:
        report: The report to serialize.
        path: Destination file. Parent directories are created.

    Returns:
        True on success, False if the file could not be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            report.model_dump_json(indent=2, by_alias=True),
            encoding="utf-8",
        )
    except (OSError, TypeError, ValueError):
        logger.error("Failed to write report JSON to %s", path, exc_info=True)
        return False
    logger.info("Report JSON written to %s", path)
    return True


def export_to_csv(samples: Sequence[BatterySample], path: str | Path) -> bool:
    """Write *samples* as CSV to *path*, rows in the order given.

    Args:
        samples: Samples to dump. Not re-sorted.
        path: Destination file. Parent directories are created.

    Returns:
        True on success, False if the file could not be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for sample in samples:
                writer.writerow(_csv_row(sample))
    except (OSError, TypeError, ValueError):
        logger.error("Failed to write sample CSV to %s", path, exc_info=True)
        return False
    logger.info("Sample CSV written to %s (%d rows)", path, len(samples))
    return True


def load_report(path: str | Path) -> BatteryReport:
    """Read a report previously written by :func:`export_to_json`."""
    return BatteryReport.model_validate_json(Path(path).read_text(encoding="utf-8"))
