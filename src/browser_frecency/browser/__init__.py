"""Browser history collation (Chromium family, Firefox, Safari)."""

from browser_frecency.browser.models import BrowserVariant, HistoryEntry, HistorySchema
from browser_frecency.browser.schemas import resolve
from browser_frecency.browser.snapshots import find_snapshots, stage
from browser_frecency.browser.reader import BrowserHistoryReader, collate, extract

__all__ = [
    "BrowserVariant",
    "HistoryEntry",
    "HistorySchema",
    "resolve",
    "stage",
    "find_snapshots",
    "extract",
    "BrowserHistoryReader",
    "collate",
]
