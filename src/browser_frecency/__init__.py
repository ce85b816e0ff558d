"""Rank URLs from local browser history by frecency."""

__version__ = "0.1.0"
