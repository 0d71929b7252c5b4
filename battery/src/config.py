"""
Battery report daemon configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
All configuration values come from environment variables or .env files.

CHANGELOG:
- 2026-10-19: Add CLEAR_AFTER_REPORT
- 2026-10-19: Initial creation

TODO:
- None
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class BatterySettings(BaseSettings):
    """Battery report daemon configuration.

    All values are loaded from environment variables. Required variables
    must be set; optional variables have sensible defaults.

    Attributes:
        capture_path: JSON-lines file of raw battery readings to replay.
        sample_interval_s: Seconds between sampling cycles.
        report_interval_s: Seconds between periodic reports.
        min_samples_for_report: Minimum history size before a periodic
            report is written.
        output_dir: Directory receiving report JSON and sample CSV files.
        health_path: Status JSON file path.
        clear_after_report: Empty the sample history after each periodic
            report whose artifacts were both written.
    """

    capture_path: str
    sample_interval_s: float = 10.0
    report_interval_s: float = 300.0
    min_samples_for_report: int = 10
    output_dir: str = "BatteryReports"
    health_path: str = "health.json"
    clear_after_report: bool = False

    @field_validator("sample_interval_s", "report_interval_s")
    @classmethod
    def interval_must_be_positive(cls, v: float) -> float:
        """Validate that loop intervals are strictly positive."""
        if v <= 0:
            raise ValueError("SAMPLE_INTERVAL_S and REPORT_INTERVAL_S must be > 0")
        return v

    @field_validator("min_samples_for_report")
    @classmethod
    def min_samples_must_be_positive(cls, v: int) -> int:
        """Validate that at least one sample is required for a report."""
        if v < 1:
            raise ValueError("MIN_SAMPLES_FOR_REPORT must be >= 1")
        return v

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
