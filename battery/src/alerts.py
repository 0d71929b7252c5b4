"""
Per-sample critical condition checks.

Each new sample is checked against a short ordered rule list; the first
matching rule produces an alert message which the daemon logs as a warning.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from battery.src.models import BatteryHealth, BatterySample

CRITICAL_TEMPERATURE_C: float = 45.0
LOW_BATTERY_LEVEL: int = 10


def check_sample(sample: BatterySample) -> str | None:
    """Return an alert message for *sample*, or ``None`` if nothing is critical.

    Rules, first match wins:
        1. Temperature above 45°C.
        2. Level at or below 10% while not charging.
        3. Health other than GOOD.
    """
    if sample.temperature > CRITICAL_TEMPERATURE_C:
        return f"Battery temperature high: {sample.temperature}°C"
    if sample.level <= LOW_BATTERY_LEVEL and not sample.is_charging:
        return f"Low battery: {sample.level}%"
    if sample.health is not BatteryHealth.GOOD:
        return f"Battery health: {sample.health.name}"
    return None
