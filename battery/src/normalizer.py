"""
Pure normalizer that converts a raw battery reading into a BatterySample.

Takes a dict of raw integer extras (as returned by a reading source), maps the
platform codes to enums, scales level and temperature, and returns a
validated BatterySample pydantic model.

This is a pure function: no side effects, no I/O, no clock. The timestamp
is accepted as a parameter so it can be injected by the caller.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging

from battery.src.codes import (
    EXTRA_HEALTH,
    EXTRA_LEVEL,
    EXTRA_PLUGGED,
    EXTRA_SCALE,
    EXTRA_STATUS,
    EXTRA_TEMPERATURE,
    EXTRA_VOLTAGE,
    PROPERTY_CAPACITY,
    charging_method_from_code,
    health_from_code,
    is_charging_status,
)
from battery.src.models import BatterySample

logger = logging.getLogger(__name__)


def _level_percent(raw: dict[str, int]) -> int | None:
    """Derive the charge percent from level/scale, falling back to capacity.

    Returns ``None`` when neither source is usable.
    """
    level = raw.get(EXTRA_LEVEL, -1)
    scale = raw.get(EXTRA_SCALE, -1)
    if level >= 0 and scale > 0:
        return level * 100 // scale

    capacity = raw.get(PROPERTY_CAPACITY)
    if capacity is not None and capacity >= 0:
        logger.warning(
            "Reading has unusable level=%s scale=%s; using capacity=%s",
            level,
            scale,
            capacity,
        )
        return capacity

    logger.warning(
        "Reading has unusable level=%s scale=%s and no capacity",
        level,
        scale,
    )
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(raw: dict[str, int], *, ts_ms: int) -> BatterySample | None:
    """Convert a raw battery reading into a validated BatterySample.

    Args:
        raw: Dict mapping extra names (``level``, ``scale``, ``health``,
            ``temperature``, ``voltage``, ``status``, ``plugged`` and the
            optional ``capacity``) to raw integers.
        ts_ms: Timestamp to embed in the sample, in epoch milliseconds.

    Returns:
        A validated :class:`BatterySample`, or ``None`` if the charge
        level cannot be determined.
    """
    level = _level_percent(raw)
    if level is None:
        return None

    return BatterySample(
        level=level,
        health=health_from_code(raw.get(EXTRA_HEALTH)),
        temperature=raw.get(EXTRA_TEMPERATURE, 0) / 10.0,
        voltage=raw.get(EXTRA_VOLTAGE, 0),
        is_charging=is_charging_status(raw.get(EXTRA_STATUS)),
        charging_method=charging_method_from_code(raw.get(EXTRA_PLUGGED)),
        timestamp=ts_ms,
    )
