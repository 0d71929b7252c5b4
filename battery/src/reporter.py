"""
Report engine that turns a sequence of battery samples into a BatteryReport.

Computes central tendency and extremes for level, temperature and voltage,
counts charging cycles, splits the monitored span into charging and
discharging time, estimates a power consumption rate and a degradation
heuristic, and derives advisory recommendations from fixed thresholds.

All ordering-dependent calculations run on a timestamp-sorted copy of the
input; the caller's sequence is never mutated. Every decimal output is rounded
to two places exactly once, on the final value.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Sequence
from datetime import datetime
from decimal import ROUND_FLOOR, Decimal

from battery.src.models import BatteryHealth, BatteryReport, BatterySample

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MS_PER_MINUTE: float = 60_000.0
MS_PER_HOUR: float = 3_600_000.0

EXPECTED_FULL_CHARGE_VOLTAGE_MV: float = 4200.0
"""Nominal full-charge voltage of a single Li-ion cell."""

FULL_CHARGE_LEVEL: int = 95
"""Level (percent) from which a charging sample counts as near-full."""

REPORT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

HIGH_MAX_TEMPERATURE_C: float = 45.0
HIGH_AVG_TEMPERATURE_C: float = 35.0
DEGRADATION_CHECK_PCT: float = 10.0
DEGRADATION_REPLACE_PCT: float = 20.0

MSG_HIGH_MAX_TEMPERATURE = (
    "Battery temperature exceeded 45°C. "
    "Consider reducing device usage during charging."
)
MSG_HIGH_AVG_TEMPERATURE = (
    "Average temperature is high. Ensure proper ventilation during rides."
)
MSG_LONG_CHARGING = (
    "Long charging times detected. Check charging cable and power source."
)
MSG_DEGRADATION = "Battery degradation detected. Consider battery health check."
MSG_REPLACEMENT = (
    "Significant battery degradation. Battery replacement may be needed."
)
STANDING_TIPS: tuple[str, str] = (
    "For optimal battery life, avoid charging to 100% regularly.",
    "Try to keep battery level between 20-80% when possible.",
)


class EmptyInputError(ValueError):
    """Raised when a report is requested for an empty sample sequence."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def round2(value: float) -> float:
    """Round *value* to two decimal places, ties toward positive infinity.

    Works on the decimal text of the float so that values such as 2.675
    round up as written instead of following their binary approximation.
    """
    shifted = Decimal(str(value)) * 100 + Decimal("0.5")
    return float(shifted.to_integral_value(rounding=ROUND_FLOOR) / 100)


def count_charging_cycles(sorted_samples: Sequence[BatterySample]) -> int:
    """Count the maximal runs of consecutive charging samples."""
    cycles = 0
    was_charging = False
    for sample in sorted_samples:
        if sample.is_charging and not was_charging:
            cycles += 1
        was_charging = sample.is_charging
    return cycles


def calculate_charging_time(
    sorted_samples: Sequence[BatterySample],
) -> tuple[float, float]:
    """Split the monitored span into charging and discharging minutes.

    Each interval between adjacent samples is attributed entirely to the
    state of the later sample.

    Returns:
        ``(charging_minutes, discharging_minutes)``, unrounded.
    """
    charging = 0.0
    discharging = 0.0
    for previous, current in zip(sorted_samples, sorted_samples[1:]):
        minutes = (current.timestamp - previous.timestamp) / MS_PER_MINUTE
        if current.is_charging:
            charging += minutes
        else:
            discharging += minutes
    return charging, discharging


def calculate_power_consumption_rate(
    sorted_samples: Sequence[BatterySample],
) -> float:
    """Percent of charge lost per hour across the discharging samples.

    Measured between the first and last non-charging samples. A negative
    value (level rose while not charging) is returned as is.
    """
    if len(sorted_samples) < 2:
        return 0.0

    discharging = [s for s in sorted_samples if not s.is_charging]
    if len(discharging) < 2:
        return 0.0

    first, last = discharging[0], discharging[-1]
    level_drop = first.level - last.level
    hours = (last.timestamp - first.timestamp) / MS_PER_HOUR
    return level_drop / hours if hours > 0 else 0.0


def estimate_battery_degradation(sorted_samples: Sequence[BatterySample]) -> float:
    """Estimate cell wear from the average near-full-charge voltage.

    Returns the percentage deficit against the nominal full-charge voltage,
    floored at zero, or zero when no near-full charging sample exists.
    """
    full_charges = [
        s for s in sorted_samples if s.level >= FULL_CHARGE_LEVEL and s.is_charging
    ]
    if not full_charges:
        return 0.0

    average_voltage = statistics.fmean(s.voltage for s in full_charges)
    deficit = EXPECTED_FULL_CHARGE_VOLTAGE_MV - average_voltage
    return max(0.0, deficit / EXPECTED_FULL_CHARGE_VOLTAGE_MV * 100)


def generate_recommendations(
    avg_temp: float,
    max_temp: float,
    charging_minutes: float,
    discharging_minutes: float,
    degradation: float,
) -> list[str]:
    """Build the ordered advisory list; the standing tips always come last."""
    recommendations: list[str] = []

    if max_temp > HIGH_MAX_TEMPERATURE_C:
        recommendations.append(MSG_HIGH_MAX_TEMPERATURE)
    if avg_temp > HIGH_AVG_TEMPERATURE_C:
        recommendations.append(MSG_HIGH_AVG_TEMPERATURE)
    if charging_minutes > discharging_minutes * 2:
        recommendations.append(MSG_LONG_CHARGING)
    if degradation > DEGRADATION_CHECK_PCT:
        recommendations.append(MSG_DEGRADATION)
    if degradation > DEGRADATION_REPLACE_PCT:
        recommendations.append(MSG_REPLACEMENT)

    recommendations.extend(STANDING_TIPS)
    return recommendations


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_report(
    samples: Sequence[BatterySample],
    *,
    now: datetime | None = None,
) -> BatteryReport:
    """Generate a BatteryReport from a non-empty sequence of samples.

    Args:
        samples: Battery samples in any order. Not modified.
        now: Wall-clock time used for ``report_date``. Defaults to the
            current local time.

    Returns:
        The computed :class:`BatteryReport`.

    Raises:
        EmptyInputError: If *samples* is empty.
    """
    if not samples:
        raise EmptyInputError("Battery data cannot be empty")

    sorted_samples = sorted(samples, key=lambda s: s.timestamp)
    first, last = sorted_samples[0], sorted_samples[-1]
    duration_hours = (last.timestamp - first.timestamp) / MS_PER_HOUR

    levels = [s.level for s in samples]
    temperatures = [s.temperature for s in samples]
    average_temp = statistics.fmean(temperatures)
    max_temp = max(temperatures)

    charging_minutes, discharging_minutes = calculate_charging_time(sorted_samples)
    degradation = estimate_battery_degradation(sorted_samples)
    health_status = sorted_samples[-1].health if sorted_samples else BatteryHealth.UNKNOWN

    recommendations = generate_recommendations(
        average_temp,
        max_temp,
        charging_minutes,
        discharging_minutes,
        degradation,
    )

    report_date = (now or datetime.now()).strftime(REPORT_DATE_FORMAT)
    logger.debug(
        "Generating report over %d samples spanning %.3f h",
        len(samples),
        duration_hours,
    )

    return BatteryReport(
        report_date=report_date,
        total_samples=len(samples),
        monitoring_duration_hours=round2(duration_hours),
        average_battery_level=round2(statistics.fmean(levels)),
        min_battery_level=min(levels),
        max_battery_level=max(levels),
        average_temperature=round2(average_temp),
        max_temperature=round2(max_temp),
        min_temperature=round2(min(temperatures)),
        average_voltage=round2(statistics.fmean(s.voltage for s in samples)),
        charging_cycles=count_charging_cycles(sorted_samples),
        time_charging=round2(charging_minutes),
        time_discharging=round2(discharging_minutes),
        health_status=health_status,
        power_consumption_rate=round2(
            calculate_power_consumption_rate(sorted_samples)
        ),
        battery_degradation=round2(degradation),
        recommendations=tuple(recommendations),
    )
