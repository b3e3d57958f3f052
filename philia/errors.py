"""
Exception types raised by the scheduling core.
"""

from __future__ import annotations


class PhiliaError(Exception):
    """Base class for scheduling-core errors."""


class ConfigError(PhiliaError, ValueError):
    """Scheduler configuration is unusable (e.g. wrong weight vector length)."""


class InsufficientDataError(PhiliaError):
    """Not enough review history to fit FSRS weights."""

    def __init__(self, found: int, required: int):
        self.found = found
        self.required = required
        super().__init__(
            f"Not enough review history. Need at least {required} reviews, "
            f"but found only {found}."
        )


class OptimizationError(PhiliaError):
    """The external weight optimizer failed or returned unusable weights."""


class BackupFormatError(PhiliaError, ValueError):
    """A backup payload could not be parsed."""
