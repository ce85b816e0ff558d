"""Where each browser keeps its history database, per platform."""

from __future__ import annotations

import glob
import logging
import sys
from pathlib import Path

from browser_frecency.browser.models import BrowserVariant, HistorySchema
from browser_frecency.exceptions import HomeDirectoryError

logger = logging.getLogger(__name__)

HOME_MARKER = "{home}"
WILDCARD_CHARS = "*?["

MACOS = "macos"
WINDOWS = "windows"
LINUX = "linux"

# Seconds from 1601-01-01 to 1970-01-01 (Chrome/WebKit epoch).
CHROME_EPOCH_OFFSET = 11644473600
# Seconds from 1970-01-01 to 2001-01-01 (Safari/Core Data epoch).
APPLE_EPOCH_OFFSET = 978307200

# Every query yields: id, url, title, visit_count, typed_count, last_visit_time (unix seconds)
CHROMIUM_QUERY = f"""
    SELECT
        id,
        url,
        COALESCE(title, ''),
        visit_count,
        typed_count,
        CAST((CAST(last_visit_time AS REAL) / 1000000) - {CHROME_EPOCH_OFFSET} AS INTEGER)
    FROM urls
    ORDER BY visit_count DESC
"""

FIREFOX_QUERY = """
    SELECT
        id,
        url,
        COALESCE(title, ''),
        visit_count,
        typed,
        CAST(COALESCE(last_visit_date, 0) / 1000000 AS INTEGER)
    FROM moz_places
    ORDER BY visit_count DESC
"""

# One row per history item; Safari has no typed counter, visit_count_score stands in.
SAFARI_QUERY = f"""
    SELECT
        i.id,
        i.url,
        COALESCE((
            SELECT lv.title FROM history_visits lv
            WHERE lv.history_item = i.id
            ORDER BY lv.visit_time DESC
            LIMIT 1
        ), ''),
        i.visit_count,
        COALESCE(CAST(i.visit_count_score / 100 AS INTEGER), 0),
        CAST(COALESCE(MAX(v.visit_time), 0) + {APPLE_EPOCH_OFFSET} AS INTEGER)
    FROM history_items i
    LEFT JOIN history_visits v ON v.history_item = i.id
    GROUP BY i.id
    ORDER BY i.visit_count DESC
"""

PATH_TEMPLATES: dict[BrowserVariant, dict[str, str]] = {
    BrowserVariant.ARC: {
        MACOS: "{home}/Library/Application Support/Arc/User Data/Default/History",
        WINDOWS: "{home}\\AppData\\Local\\Arc\\User Data\\Default\\History",
        LINUX: "{home}/.config/Arc/User Data/Default/History",
    },
    BrowserVariant.CHROME: {
        MACOS: "{home}/Library/Application Support/Google/Chrome/Default/History",
        WINDOWS: "{home}\\AppData\\Local\\Google\\Chrome\\User Data\\Default\\History",
        LINUX: "{home}/.config/google-chrome/Default/History",
    },
    BrowserVariant.FIREFOX: {
        MACOS: "{home}/Library/Application Support/Firefox/Profiles/**/places.sqlite",
        WINDOWS: "{home}\\AppData\\Roaming\\Mozilla\\Firefox\\Profiles\\*.default-release\\places.sqlite",
        LINUX: "{home}/.mozilla/firefox/*.default-release/places.sqlite",
    },
    BrowserVariant.SAFARI: {
        MACOS: "{home}/Library/Safari/History.db",
    },
    BrowserVariant.BRAVE: {
        MACOS: "{home}/Library/Application Support/BraveSoftware/Brave-Browser/Default/History",
        WINDOWS: "{home}\\AppData\\Local\\BraveSoftware\\Brave-Browser\\User Data\\Default\\History",
        LINUX: "{home}/.config/BraveSoftware/Brave-Browser/Default/History",
    },
    BrowserVariant.EDGE: {
        MACOS: "{home}/Library/Application Support/Microsoft Edge/Default/History",
        WINDOWS: "{home}\\AppData\\Local\\Microsoft\\Edge\\User Data\\Default\\History",
        LINUX: "{home}/.config/microsoft-edge/Default/History",
    },
    BrowserVariant.VIVALDI: {
        MACOS: "{home}/Library/Application Support/Vivaldi/Default/History",
        WINDOWS: "{home}\\AppData\\Local\\Vivaldi\\User Data\\Default\\History",
        LINUX: "{home}/.config/vivaldi/Default/History",
    },
    BrowserVariant.OPERA: {
        MACOS: "{home}/Library/Application Support/com.operasoftware.Opera/History",
        WINDOWS: "{home}\\AppData\\Roaming\\Opera Software\\Opera Stable\\History",
        LINUX: "{home}/.config/opera/History",
    },
    BrowserVariant.CHROMIUM: {
        MACOS: "{home}/Library/Application Support/Chromium/Default/History",
        WINDOWS: "{home}\\AppData\\Local\\Chromium\\User Data\\Default\\History",
        LINUX: "{home}/.config/chromium/Default/History",
    },
}

QUERIES: dict[BrowserVariant, str] = {
    BrowserVariant.FIREFOX: FIREFOX_QUERY,
    BrowserVariant.SAFARI: SAFARI_QUERY,
}


def current_platform() -> str:
    """Map sys.platform onto a PATH_TEMPLATES key."""
    if sys.platform == "darwin":
        return MACOS
    if sys.platform in ("win32", "cygwin"):
        return WINDOWS
    if sys.platform.startswith("linux"):
        return LINUX
    return sys.platform


def home_directory() -> str:
    """The current user's home directory; fatal when it cannot be found."""
    try:
        return str(Path.home())
    except (RuntimeError, KeyError) as e:
        raise HomeDirectoryError(f"Could not determine a home directory: {e}") from e


def query_for(variant: BrowserVariant) -> str:
    return QUERIES.get(variant, CHROMIUM_QUERY)


def resolve(
    variant: BrowserVariant,
    platform: str | None = None,
    home: str | Path | None = None,
) -> HistorySchema | None:
    """Build the history schema for a browser on this machine.

    Returns None when the browser has no known location on the platform.
    Raises HomeDirectoryError when no home directory is given and none can
    be determined.
    """
    platform = platform or current_platform()
    template = PATH_TEMPLATES.get(variant, {}).get(platform)
    if template is None:
        logger.debug("%s has no history location on %s", variant.display_name, platform)
        return None

    home_str = str(home) if home is not None else home_directory()
    pattern = None
    if any(ch in template for ch in WILDCARD_CHARS):
        # Brackets or stars in the home directory itself must match literally.
        pattern = template.replace(HOME_MARKER, glob.escape(home_str))
    return HistorySchema(
        variant=variant,
        path=template.replace(HOME_MARKER, home_str),
        query=query_for(variant),
        pattern=pattern,
    )


def resolve_all(
    platform: str | None = None,
    home: str | Path | None = None,
) -> list[HistorySchema]:
    """Resolve every variant in collation order, skipping unsupported ones."""
    schemas = []
    for variant in BrowserVariant.variants():
        schema = resolve(variant, platform=platform, home=home)
        if schema is not None:
            schemas.append(schema)
    return schemas
