"""
Battery report daemon package.

Samples battery telemetry from a raw reading source on a timer, keeps the
samples in an append-only history, and periodically writes a statistical
summary (JSON) plus a raw sample dump (CSV) to local storage.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""
