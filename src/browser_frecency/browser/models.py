"""Data models for the browser history module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BrowserVariant(Enum):
    """A supported browser. The value is the stable display name."""

    ARC = "Arc"
    CHROME = "Chrome"
    FIREFOX = "Firefox"
    SAFARI = "Safari"
    BRAVE = "Brave"
    EDGE = "Edge"
    VIVALDI = "Vivaldi"
    OPERA = "Opera"
    CHROMIUM = "Chromium"

    @classmethod
    def variants(cls) -> list[BrowserVariant]:
        """All variants in collation order."""
        return list(cls)

    @property
    def display_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class HistorySchema:
    """Where one browser keeps its history and how to read it."""

    variant: BrowserVariant
    path: str  # absolute, may contain one wildcard segment
    query: str
    pattern: str | None = None  # glob form of path, home directory escaped

    @property
    def has_wildcard(self) -> bool:
        return self.pattern is not None


@dataclass(frozen=True)
class HistoryEntry:
    """A normalized browser history record."""

    variant: BrowserVariant
    id: str  # "<display name>-<native id>"
    url: str
    title: str
    visit_count: int
    typed_count: int
    last_visit_time: int  # seconds since Unix epoch
