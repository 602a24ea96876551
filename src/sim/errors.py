# src/sim/errors.py
from __future__ import annotations


class RunnerError(Exception):
    """Base class for simulation errors."""


class ConfigError(RunnerError, ValueError):
    """SessionConfig rejected at reset time."""


class InvalidStateError(RunnerError, RuntimeError):
    """Operation not allowed in the session's current phase (e.g. step after termination)."""
