"""
Shared test fixtures for battery report daemon tests.

Provides environment variable fixtures for BatterySettings configuration
tests and sample builders shared across test modules. All daemon env vars are
cleaned before each test to ensure isolation.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from battery.src.models import BatteryHealth, BatterySample, ChargingMethod

# All BatterySettings environment variable names, used for cleanup.
_ALL_BATTERY_ENV_VARS = (
    "CAPTURE_PATH",
    "SAMPLE_INTERVAL_S",
    "REPORT_INTERVAL_S",
    "MIN_SAMPLES_FOR_REPORT",
    "OUTPUT_DIR",
    "HEALTH_PATH",
    "CLEAR_AFTER_REPORT",
)


@pytest.fixture(autouse=True)
def _clean_battery_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all daemon env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_BATTERY_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def env_vars_full(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all required and optional environment variables for BatterySettings."""
    env = {
        "CAPTURE_PATH": "/tmp/capture.jsonl",
        "SAMPLE_INTERVAL_S": "5",
        "REPORT_INTERVAL_S": "60",
        "MIN_SAMPLES_FOR_REPORT": "3",
        "OUTPUT_DIR": "/tmp/reports",
        "HEALTH_PATH": "/tmp/health.json",
        "CLEAR_AFTER_REPORT": "true",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture()
def env_vars_required_only(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set only the required environment variables (no optional ones)."""
    env = {"CAPTURE_PATH": "capture.jsonl"}
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


def _build_sample(
    *,
    level: int = 80,
    health: BatteryHealth = BatteryHealth.GOOD,
    temperature: float = 30.0,
    voltage: int = 3900,
    is_charging: bool = False,
    charging_method: ChargingMethod = ChargingMethod.NONE,
    timestamp: int = 0,
) -> BatterySample:
    return BatterySample(
        level=level,
        health=health,
        temperature=temperature,
        voltage=voltage,
        is_charging=is_charging,
        charging_method=charging_method,
        timestamp=timestamp,
    )


@pytest.fixture()
def make_sample() -> Callable[..., BatterySample]:
    """Return a BatterySample builder with sensible defaults."""
    return _build_sample
