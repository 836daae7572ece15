"""Exceptions for Pulse diagnostics.

Every error below is recovered by the component that detects it; none of
them is allowed to escape a hook.
"""


class PulseError(Exception):
    """Base exception for Pulse operations."""

    pass


class ConfigUnavailableError(PulseError):
    """Raised when a settings file is missing or unreadable."""

    pass


class ConfigInvalidError(PulseError):
    """Raised when a settings file is readable but malformed."""

    pass


class ProbeUnavailableError(PulseError):
    """Raised when the probe command is not installed."""

    pass


class ProbeTimeoutError(PulseError):
    """Raised when a probe exceeds its deadline."""

    pass


class ProbeExecutionError(PulseError):
    """Raised when a probe command fails to run or exits non-zero."""

    pass


class SinkWriteError(PulseError):
    """Raised when a logging sink cannot write to its backing store."""

    pass


class FormatError(PulseError):
    """Raised when a summary cannot be rendered."""

    pass


class HealthScoreError(PulseError):
    """Raised when a health phase is recorded more than once."""

    pass
