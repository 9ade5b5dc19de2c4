"""Exceptions raised by the log manager."""


class LogManagerError(Exception):
    """Base exception for all log management errors."""

    pass


class ProbeError(LogManagerError):
    """Raised when filesystem statistics cannot be read."""

    pass


class WriteError(LogManagerError):
    """Raised when a log subsystem configuration cannot be persisted."""

    pass


class RestartError(LogManagerError):
    """Raised when a log subsystem service cannot be restarted."""

    pass


class CommandError(LogManagerError):
    """Raised when an external command fails or times out."""

    pass
