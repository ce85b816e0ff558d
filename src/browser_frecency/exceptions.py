"""Unified exception hierarchy for browser-frecency."""


class FrecencyError(Exception):
    """Base exception for all browser-frecency errors."""


# Configuration
class ConfigurationError(FrecencyError):
    """The run cannot be configured for this machine."""


class HomeDirectoryError(ConfigurationError):
    """The current user's home directory could not be determined."""


# Browser
class BrowserError(FrecencyError):
    """Base exception for browser history operations."""


class SnapshotError(BrowserError):
    """Failed to copy a history database into the scratch area."""


class HistoryReadError(BrowserError):
    """Failed to open or query a history snapshot."""


class HistoryRowError(HistoryReadError):
    """A result row could not be mapped to a history entry."""
