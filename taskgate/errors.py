"""Error types raised by queue construction, configuration and submission."""

from __future__ import annotations


class QueueError(Exception):
    """Base class for all taskgate errors."""


class ConfigurationError(QueueError):
    """A mandatory field is missing or was cleared."""


class InvalidConfigurationError(ConfigurationError):
    """A setter received a value of the wrong shape."""


class BusyError(QueueError):
    """Structural configuration was changed while tasks are running."""

    def __init__(self, field_name: str, running: int):
        super().__init__(f"cannot set {field_name} while {running} task(s) are running")
        self.field_name = field_name
        self.running = running


class InvalidCallbackError(QueueError, TypeError):
    """A per-task callback passed to push() is not callable."""
