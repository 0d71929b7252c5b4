"""
Status file writer for the battery report daemon.

Keeps a DaemonStatus model describing what the daemon has actually done and
rewrites it as JSON after every change:
- last_sample_ts / sample_count: bumped only when a sample is appended.
- last_report_ts / last_health_status / last_report_path / last_data_path:
  taken from the most recent report whose artifacts were both written.
- source_exhausted: set once the reading source has nothing left to replay.

The file is replaced atomically (write to a sibling temp file, then rename)
so a monitor never reads a half-written document.

CHANGELOG:
- 2026-10-19: Status as a pydantic model fed from samples and reports
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel

from battery.src.models import BatteryHealth, BatteryReport


class DaemonStatus(BaseModel):
    """Snapshot of daemon progress written to the status file.

    Attributes:
        last_sample_ts: ISO timestamp of the most recently appended sample.
        sample_count: Number of samples held in the history.
        last_report_ts: ISO timestamp of the most recent written report.
        last_health_status: ``health_status`` of that report.
        last_report_path: Report JSON path of that report.
        last_data_path: Sample CSV path of that report.
        source_exhausted: True once the reading source is finished.
    """

    last_sample_ts: datetime | None = None
    sample_count: int = 0
    last_report_ts: datetime | None = None
    last_health_status: BatteryHealth | None = None
    last_report_path: str | None = None
    last_data_path: str | None = None
    source_exhausted: bool = False


class HealthWriter:
    """Maintains the daemon status and mirrors it to a JSON file.

    Args:
        path: Filesystem path for the status JSON file. Accepts str or Path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.status = DaemonStatus()

    def record_sample(self, sample_count: int) -> None:
        """Record that a sample was appended, bringing the history to *sample_count*."""
        self._update(last_sample_ts=datetime.now(tz=UTC), sample_count=sample_count)

    def record_report(
        self,
        report: BatteryReport,
        report_path: str | Path,
        data_path: str | Path,
    ) -> None:
        """Record a report whose JSON and CSV artifacts were both written."""
        self._update(
            last_report_ts=datetime.now(tz=UTC),
            last_health_status=report.health_status,
            last_report_path=str(report_path),
            last_data_path=str(data_path),
        )

    def record_history_cleared(self) -> None:
        """Record that the history was emptied after a report."""
        self._update(sample_count=0)

    def record_source_exhausted(self) -> None:
        """Record that the reading source has nothing left to yield."""
        self._update(source_exhausted=True)

    def _update(self, **changes: object) -> None:
        self.status = self.status.model_copy(update=changes)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(self.status.model_dump_json(), encoding="utf-8")
        tmp_path.replace(self.path)
