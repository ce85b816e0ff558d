"""Read history entries out of staged browser snapshots."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Sequence

from browser_frecency.browser.models import BrowserVariant, HistoryEntry, HistorySchema
from browser_frecency.browser.schemas import resolve
from browser_frecency.browser.snapshots import create_scratch_root, find_snapshots, stage
from browser_frecency.exceptions import HistoryReadError, HistoryRowError

logger = logging.getLogger(__name__)


def _as_int(value, column: str, default: int | None = None) -> int:
    if value is None and default is not None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise HistoryRowError(f"{column} is not a number: {value!r}")
    return int(value)


def entry_from_row(row: Sequence, variant: BrowserVariant) -> HistoryEntry:
    """Map one positional result row onto a HistoryEntry.

    Columns: id, url, title, visit_count, typed_count, last_visit_time.
    """
    try:
        native_id, url, title, visit_count, typed_count, last_visit_time = row
    except (TypeError, ValueError) as e:
        raise HistoryRowError(f"Expected 6 columns, got {row!r}") from e

    if not isinstance(url, str):
        raise HistoryRowError(f"url is not text: {url!r}")

    return HistoryEntry(
        variant=variant,
        id=f"{variant.display_name}-{_as_int(native_id, 'id')}",
        url=url,
        title=title if isinstance(title, str) else "",
        visit_count=max(0, _as_int(visit_count, "visit_count", default=0)),
        typed_count=max(0, _as_int(typed_count, "typed_count", default=0)),
        last_visit_time=_as_int(last_visit_time, "last_visit_time", default=0),
    )


def _connect(snapshot_path: Path) -> sqlite3.Connection:
    # as_uri percent-encodes "#", "?" and "%" in the scratch path
    uri = f"{Path(snapshot_path).resolve().as_uri()}?mode=ro"
    try:
        return sqlite3.connect(uri, uri=True)
    except sqlite3.Error as e:
        raise HistoryReadError(f"Cannot open {snapshot_path}: {e}") from e


def read_entries(snapshot_path: Path, schema: HistorySchema) -> list[HistoryEntry]:
    """Run the schema query against one snapshot; raises HistoryReadError."""
    conn = _connect(snapshot_path)
    try:
        try:
            rows = conn.execute(schema.query).fetchall()
        except sqlite3.Error as e:
            raise HistoryReadError(
                f"Failed querying {schema.variant.display_name} history in {snapshot_path}: {e}"
            ) from e
        return [entry_from_row(row, schema.variant) for row in rows]
    finally:
        conn.close()


def extract(
    snapshot_path: Path,
    schema: HistorySchema,
    errors: dict[str, str] | None = None,
) -> list[HistoryEntry] | None:
    """Entries from one snapshot, or None when the snapshot could not be read.

    When `errors` is given, the failure is recorded under the browser's
    display name.
    """
    name = schema.variant.display_name
    try:
        entries = read_entries(snapshot_path, schema)
    except HistoryRowError as e:
        logger.warning("Bad %s history row in %s: %s", name, snapshot_path, e)
        if errors is not None:
            errors[name] = str(e)
        return None
    except HistoryReadError as e:
        logger.warning("%s history skipped: %s", name, e)
        if errors is not None:
            errors[name] = str(e)
        return None
    logger.debug("Read %d %s entries from %s", len(entries), name, snapshot_path)
    return entries


class BrowserHistoryReader:
    """Collate history from every supported browser on this machine."""

    def __init__(
        self,
        scratch_root: Path | None = None,
        platform: str | None = None,
        home: str | Path | None = None,
        variants: Sequence[BrowserVariant] | None = None,
    ) -> None:
        self.scratch_root = scratch_root
        self.platform = platform
        self.home = home
        self.variants = list(variants) if variants is not None else BrowserVariant.variants()
        self.last_errors: dict[str, str] = {}

    def collate(self) -> list[HistoryEntry]:
        """Entries from all browsers, in variant then snapshot order.

        Raises HomeDirectoryError when the home directory is unknown; every
        other failure only drops the affected snapshot.
        """
        self.last_errors = {}
        if self.scratch_root is None:
            self.scratch_root = create_scratch_root()
        else:
            self.scratch_root.mkdir(parents=True, exist_ok=True)

        entries: list[HistoryEntry] = []
        for variant in self.variants:
            schema = resolve(variant, platform=self.platform, home=self.home)
            if schema is None:
                continue
            stage(schema, self.scratch_root)
            for snapshot in find_snapshots(variant, self.scratch_root):
                found = extract(snapshot, schema, errors=self.last_errors)
                if found:
                    entries.extend(found)
        return entries


def collate(
    scratch_root: Path | None = None,
    platform: str | None = None,
    home: str | Path | None = None,
) -> list[HistoryEntry]:
    """One-shot collation across all browsers."""
    return BrowserHistoryReader(scratch_root=scratch_root, platform=platform, home=home).collate()
