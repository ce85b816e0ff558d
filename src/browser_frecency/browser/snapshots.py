"""Copy locked history databases into a scratch directory and find them again.

A running browser holds its history database open (and on some platforms
locked), so it is never queried in place. Each source file is copied into a
per-run scratch root first; snapshots are named after the browser so the
reader can discover them without any extra bookkeeping.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path, PurePath

from browser_frecency.browser.models import BrowserVariant, HistorySchema
from browser_frecency.exceptions import SnapshotError

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = "frecency-history"
SNAPSHOT_SUFFIX = ".sqlite"

_WILDCARD_CHARS = "*?["
# glob.escape wraps each special character in brackets, e.g. "[[]"
_ESCAPED_CHAR = re.compile(r"\[([*?\[])\]")


def _unescape(part: str) -> str:
    return _ESCAPED_CHAR.sub(r"\1", part)


def _is_wildcard(part: str) -> bool:
    return any(ch in _ESCAPED_CHAR.sub("", part) for ch in _WILDCARD_CHARS)


def create_scratch_root() -> Path:
    """Create a fresh scratch directory for this run's snapshots."""
    root = Path(tempfile.mkdtemp(prefix=f"{SNAPSHOT_PREFIX}-"))
    logger.debug("Scratch root is %s", root)
    return root


def snapshot_name(variant: BrowserVariant, ordinal: int | None = None) -> str:
    """File name of a snapshot; ordinals disambiguate wildcard matches."""
    if ordinal is None:
        return f"{SNAPSHOT_PREFIX}-{variant.display_name}{SNAPSHOT_SUFFIX}"
    return f"{SNAPSHOT_PREFIX}-{variant.display_name}-{ordinal}{SNAPSHOT_SUFFIX}"


def expand_wildcard(pattern: str) -> list[Path]:
    """Expand a path containing one wildcard segment into existing files.

    Characters escaped with glob.escape before the wildcard segment are
    matched literally.
    """
    parts = PurePath(pattern).parts
    for index, part in enumerate(parts):
        if _is_wildcard(part):
            break
    else:
        path = Path(*(_unescape(part) for part in parts))
        return [path] if path.is_file() else []

    base = Path(*(_unescape(part) for part in parts[:index]))
    if not base.is_dir():
        return []
    relative = "/".join(parts[index:])
    return sorted(p for p in base.glob(relative) if p.is_file())


def copy_snapshot(source: str | Path, destination: Path) -> Path:
    """Copy one database file; raises SnapshotError on any filesystem failure.

    A partly written destination is removed so discovery never finds it.
    """
    try:
        shutil.copy2(source, destination)
    except OSError as e:
        try:
            destination.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.warning("Could not remove partial snapshot %s: %s", destination, cleanup_error)
        raise SnapshotError(f"Failed to copy {source} to {destination}: {e}") from e
    logger.debug("Copied %s to %s", source, destination)
    return destination


def stage(schema: HistorySchema, scratch_root: Path) -> list[Path]:
    """Snapshot every database the schema points at.

    Wildcard matches are copied under ordinal names, then the literal path is
    always tried as well. Failures are logged and skipped; the returned list
    holds only the snapshots that were written.
    """
    name = schema.variant.display_name
    sources: list[tuple[str | Path, Path]] = []

    if schema.has_wildcard:
        matches = expand_wildcard(schema.pattern)
        if not matches:
            logger.info("No %s profiles match %s", name, schema.path)
        for ordinal, match in enumerate(matches, start=1):
            sources.append((match, scratch_root / snapshot_name(schema.variant, ordinal)))
    sources.append((schema.path, scratch_root / snapshot_name(schema.variant)))

    written: list[Path] = []
    for source, destination in sources:
        try:
            written.append(copy_snapshot(source, destination))
        except SnapshotError as e:
            if isinstance(e.__cause__, FileNotFoundError):
                logger.info("%s history not found at %s", name, source)
            else:
                logger.warning("Skipping %s history: %s", name, e)
    return written


def find_snapshots(variant: BrowserVariant, scratch_root: Path) -> list[Path]:
    """Snapshots staged for a browser: the literal copy first, then by ordinal."""
    if not scratch_root.is_dir():
        return []

    pattern = re.compile(
        rf"^{re.escape(SNAPSHOT_PREFIX)}-{re.escape(variant.display_name)}"
        rf"(?:-(\d+))?{re.escape(SNAPSHOT_SUFFIX)}$"
    )
    found: list[tuple[int, Path]] = []
    for path in scratch_root.glob(f"{SNAPSHOT_PREFIX}-{variant.display_name}*{SNAPSHOT_SUFFIX}"):
        match = pattern.match(path.name)
        if not match or not path.is_file():
            continue
        ordinal = int(match.group(1)) if match.group(1) else 0
        found.append((ordinal, path))

    found.sort(key=lambda item: item[0])
    return [path for _, path in found]
