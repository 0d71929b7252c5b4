"""
Raw battery reading sources and the stateful sampler wrapping them.

A source returns one raw reading per call as a dict of integer extras (see
``battery.src.codes``), or ``None`` when no reading is available. The
bundled CaptureFileSource replays readings recorded as JSON lines, one
object per line.

The Sampler is designed to be robust:

- Exponential backoff after consecutive failures (capped at MAX_BACKOFF_S).
- Never crashes the sample loop on any error.
- Logs warnings on errors but never propagates exceptions to the caller.
- End of an exhausted source is not a failure and never triggers backoff.
- Backoff waits end early when the optional shutdown event is set.

CHANGELOG:
- 2026-10-19: Exhausted source state, shutdown-aware backoff
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from pathlib import Path
from typing import IO, Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BASE_BACKOFF_S: float = 1.0
"""Initial backoff delay in seconds after the first failed read."""

MAX_BACKOFF_S: float = 60.0
"""Maximum backoff delay in seconds (cap for exponential growth)."""


class ReadingSource(Protocol):
    """Anything that yields raw battery readings.

    ``exhausted`` becomes True once the source will never yield again;
    a ``None`` read from an exhausted source is not a failure.
    """

    @property
    def exhausted(self) -> bool: ...

    def read(self) -> dict[str, int] | None: ...


# ---------------------------------------------------------------------------
# Capture file replay
# ---------------------------------------------------------------------------


class CaptureFileSource:
    """Replays raw readings from a JSON-lines capture file.

    Each non-blank line must be a JSON object mapping extra names to
    integers, e.g. ``{"level": 80, "scale": 100, "status": 3}``. Blank
    lines are skipped. After the last line the source is ``exhausted``.

    Args:
        path: Capture file path. Accepts ``str`` or ``pathlib.Path``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._fh: IO[str] | None = None
        self._line_no = 0
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        """True once end of file has been reached."""
        return self._exhausted

    def read(self) -> dict[str, int] | None:
        """Return the next reading, or ``None`` at end of file or on a bad line."""
        if self._exhausted:
            return None
        if self._fh is None:
            self._fh = self._path.open(encoding="utf-8")

        for line in self._fh:
            self._line_no += 1
            if not line.strip():
                continue
            try:
                reading = json.loads(line)
            except json.JSONDecodeError:
                logger.warning(
                    "Capture %s line %d: invalid JSON, skipping",
                    self._path,
                    self._line_no,
                )
                return None
            if not isinstance(reading, dict):
                logger.warning(
                    "Capture %s line %d: expected an object, got %s",
                    self._path,
                    self._line_no,
                    type(reading).__name__,
                )
                return None
            return reading

        self._exhausted = True
        logger.info("Capture %s exhausted after %d lines", self._path, self._line_no)
        return None

    def close(self) -> None:
        """Close the underlying file handle, if open."""
        if self._fh is not None:
            self._fh.close()
            self._fh = None


# ---------------------------------------------------------------------------
# Stateful sampler with exponential backoff
# ---------------------------------------------------------------------------


class Sampler:
    """Stateful reader with exponential backoff.

    Maintains a failure counter so that consecutive failed reads cause an
    exponentially growing wait before the next attempt. The backoff resets
    to zero after any successful read. Reaching the end of an exhausted
    source is not counted as a failure.

    When a *shutdown_event* is given, the backoff wait ends as soon as the
    event is set.

    Args:
        source: The raw reading source.
        shutdown_event: Optional event that cuts a backoff wait short.
    """

    def __init__(
        self,
        source: ReadingSource,
        *,
        shutdown_event: asyncio.Event | None = None,
    ) -> None:
        self._source = source
        self._shutdown_event = shutdown_event
        self._consecutive_failures: int = 0

    @property
    def exhausted(self) -> bool:
        """True once the underlying source will never yield again."""
        return getattr(self._source, "exhausted", False) is True

    async def _backoff(self, delay: float) -> None:
        if self._shutdown_event is None:
            await asyncio.sleep(delay)
            return
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._shutdown_event.wait(), timeout=delay)

    async def sample(self) -> dict[str, int] | None:
        """Read one raw reading with backoff on failure.

        Returns:
            A dict of raw extras on success, or ``None`` on any error or
            once the source is exhausted.
        """
        if self.exhausted:
            return None

        if self._consecutive_failures > 0:
            delay = min(
                BASE_BACKOFF_S * (2 ** (self._consecutive_failures - 1)),
                MAX_BACKOFF_S,
            )
            logger.warning(
                "Backoff: waiting %.1fs before retry (consecutive failures: %d)",
                delay,
                self._consecutive_failures,
            )
            await self._backoff(delay)
            if self._shutdown_event is not None and self._shutdown_event.is_set():
                return None

        try:
            result = self._source.read()
        except Exception:
            logger.warning("Unexpected error reading battery source", exc_info=True)
            result = None

        if result is not None:
            self._consecutive_failures = 0
        elif not self.exhausted:
            self._consecutive_failures += 1

        return result
