"""
Android BatteryManager integer codes -- single source of truth.

Defines the raw extra keys delivered with a battery-changed reading and the
integer constants used for health, status and plug source. Each lookup is a
total mapping: unmapped or missing codes resolve to an explicit default
variant rather than raising.

References:
    - android.os.BatteryManager (EXTRA_* keys, BATTERY_HEALTH_*,
      BATTERY_STATUS_*, BATTERY_PLUGGED_* constants)

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from battery.src.models import BatteryHealth, ChargingMethod

# ---------------------------------------------------------------------------
# Raw extra keys
# ---------------------------------------------------------------------------

EXTRA_LEVEL = "level"
EXTRA_SCALE = "scale"
EXTRA_HEALTH = "health"
EXTRA_TEMPERATURE = "temperature"
EXTRA_VOLTAGE = "voltage"
EXTRA_STATUS = "status"
EXTRA_PLUGGED = "plugged"
PROPERTY_CAPACITY = "capacity"
"""Fallback charge percent when level/scale are unusable."""

# ---------------------------------------------------------------------------
# Code tables
# ---------------------------------------------------------------------------

HEALTH_CODES: dict[int, BatteryHealth] = {
    1: BatteryHealth.UNKNOWN,
    2: BatteryHealth.GOOD,
    3: BatteryHealth.OVERHEAT,
    4: BatteryHealth.DEAD,
    5: BatteryHealth.OVER_VOLTAGE,
    6: BatteryHealth.UNSPECIFIED_FAILURE,
    7: BatteryHealth.COLD,
}
"""Maps BATTERY_HEALTH_* code -> BatteryHealth."""

PLUGGED_CODES: dict[int, ChargingMethod] = {
    1: ChargingMethod.AC,
    2: ChargingMethod.USB,
    4: ChargingMethod.WIRELESS,
}
"""Maps BATTERY_PLUGGED_* code -> ChargingMethod. Dock (8) is not mapped."""

STATUS_CHARGING = 2
STATUS_FULL = 5

CHARGING_STATUSES: frozenset[int] = frozenset({STATUS_CHARGING, STATUS_FULL})
"""BATTERY_STATUS_* codes that count as charging."""


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def health_from_code(code: int | None) -> BatteryHealth:
    """Return the health variant for *code*, UNKNOWN when unmapped."""
    if code is None:
        return BatteryHealth.UNKNOWN
    return HEALTH_CODES.get(code, BatteryHealth.UNKNOWN)


def charging_method_from_code(code: int | None) -> ChargingMethod:
    """Return the charging method for *code*, NONE when unmapped."""
    if code is None:
        return ChargingMethod.NONE
    return PLUGGED_CODES.get(code, ChargingMethod.NONE)


def is_charging_status(code: int | None) -> bool:
    """True when the status code means charging or full."""
    return code in CHARGING_STATUSES
