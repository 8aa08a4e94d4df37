"""Exception types raised by PropFlow."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import PropTrace


class PropFlowError(Exception):
    """Base class for PropFlow errors."""


class ConfigError(PropFlowError):
    """Configuration file is missing fields, malformed, or out of range."""


class TraceInterrupted(PropFlowError):
    """A trace stopped before reaching a source.

    The chain assembled up to the interruption is available as ``partial``.
    """

    def __init__(self, message: str, partial: Optional["PropTrace"] = None):
        super().__init__(message)
        self.partial = partial


class TraceTimeout(TraceInterrupted):
    """The wall-clock budget for a trace was exceeded."""


class TraceCancelled(TraceInterrupted):
    """The caller cancelled a trace."""
