"""
Pydantic models for battery telemetry samples and generated reports.

Defines the closed enums for battery health and charging method, the
BatterySample model holding one normalized reading, and the BatteryReport
model produced by the report engine.

Attribute names are snake_case; the JSON form uses camelCase aliases so the
exported report uses the established artifact field names.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BatteryHealth(str, Enum):
    """Battery health as reported by the platform."""

    UNKNOWN = "UNKNOWN"
    GOOD = "GOOD"
    OVERHEAT = "OVERHEAT"
    DEAD = "DEAD"
    OVER_VOLTAGE = "OVER_VOLTAGE"
    UNSPECIFIED_FAILURE = "UNSPECIFIED_FAILURE"
    COLD = "COLD"


class ChargingMethod(str, Enum):
    """Power source the device is plugged into."""

    NONE = "NONE"
    AC = "AC"
    USB = "USB"
    WIRELESS = "WIRELESS"


class BatterySample(BaseModel):
    """A single normalized battery telemetry reading.

    The timestamp is injected by the caller (not derived from the raw
    reading), keeping the normalizer a pure function.

    Attributes:
        level: Charge level in percent. Normally 0-100 but may exceed 100
            on devices with sensor quirks.
        health: Battery health enum.
        temperature: Battery temperature in degrees Celsius (tenth precision).
        voltage: Battery voltage in millivolts.
        is_charging: True when the battery is charging or full.
        charging_method: Power source enum.
        timestamp: Milliseconds since the Unix epoch.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    level: int
    health: BatteryHealth
    temperature: float
    voltage: int
    is_charging: bool
    charging_method: ChargingMethod
    timestamp: int


class BatteryReport(BaseModel):
    """Statistical summary over a sequence of battery samples.

    All decimal fields are rounded to two places. Durations for
    ``time_charging`` and ``time_discharging`` are in minutes.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    report_date: str
    total_samples: int
    monitoring_duration_hours: float
    average_battery_level: float
    min_battery_level: int
    max_battery_level: int
    average_temperature: float
    max_temperature: float
    min_temperature: float
    average_voltage: float
    charging_cycles: int
    time_charging: float
    time_discharging: float
    health_status: BatteryHealth
    power_consumption_rate: float
    battery_degradation: float
    recommendations: tuple[str, ...]
