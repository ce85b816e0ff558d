"""Tests for exception hierarchy."""

from browser_frecency.exceptions import (
    FrecencyError,
    ConfigurationError,
    HomeDirectoryError,
    BrowserError,
    SnapshotError,
    HistoryReadError,
    HistoryRowError,
)


def test_all_inherit_from_base():
    for exc_class in [
        ConfigurationError, HomeDirectoryError,
        BrowserError, SnapshotError, HistoryReadError, HistoryRowError,
    ]:
        assert issubclass(exc_class, FrecencyError)


def test_configuration_hierarchy():
    assert issubclass(HomeDirectoryError, ConfigurationError)
    assert not issubclass(HomeDirectoryError, BrowserError)


def test_browser_hierarchy():
    assert issubclass(SnapshotError, BrowserError)
    assert issubclass(HistoryReadError, BrowserError)
    assert issubclass(HistoryRowError, HistoryReadError)


def test_exception_message():
    e = SnapshotError("test error")
    assert str(e) == "test error"
