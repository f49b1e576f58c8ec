"""
Exception types raised by the sweeper core.

Only configuration mistakes and out-of-range cell references are errors.
Acting on an opened cell, a flagged cell, or a finished game is a silent
no-op and never raises.
"""


class SweeperError(Exception):
    """Base class for all sweeper errors."""


class ConfigurationError(SweeperError, ValueError):
    """Invalid board dimensions, mine count or stored settings."""


class InvalidOperation(SweeperError, IndexError):
    """A reveal or flag referenced a cell that does not exist."""
