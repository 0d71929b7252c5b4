"""
Append-only in-memory log of battery samples.

The sample loop is the only writer; the report loop takes an immutable
snapshot on each tick and hands it to the report engine, so the engine never
sees a list that is being appended to.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from battery.src.models import BatterySample


class SampleHistory:
    """Growing log of samples in arrival order.

    Usage::

        history = SampleHistory()
        history.append(sample)
        report = generate_report(history.snapshot())
    """

    def __init__(self) -> None:
        self._samples: list[BatterySample] = []

    def append(self, sample: BatterySample) -> None:
        """Add *sample* to the end of the log."""
        self._samples.append(sample)

    def snapshot(self) -> tuple[BatterySample, ...]:
        """Return an immutable view of every sample recorded so far."""
        return tuple(self._samples)

    def clear(self) -> None:
        """Drop all recorded samples."""
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)
