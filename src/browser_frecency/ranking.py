"""Frecency scoring: blend visit counts, typed visits and recency."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable

from browser_frecency.browser.models import HistoryEntry

SECONDS_PER_DAY = 60 * 60 * 24

VISIT_WEIGHT = 0.80
TYPED_WEIGHT = 0.10
AGE_WEIGHT = 0.10

# Top ten plus one, matching the original loop bound.
DEFAULT_LIMIT = 11


@dataclass(frozen=True)
class RankedEntry:
    """A history entry with the score it was ranked by."""

    entry: HistoryEntry
    score: float


def now_seconds() -> int:
    return int(time.time())


def age_in_days(last_visit_time: int, now: int) -> int:
    """Whole days since the last visit; visits in the future are age 0."""
    if last_visit_time > now:
        return 0
    return (now - last_visit_time) // SECONDS_PER_DAY


def frecency_score(visit_count: int, typed_count: int, last_visit_time: int, now: int) -> float:
    """Score one URL. Never typed or never visited scores exactly 0."""
    if visit_count <= 0 or typed_count <= 0:
        return 0.0

    age = age_in_days(last_visit_time, now)
    score = visit_count * VISIT_WEIGHT + typed_count * TYPED_WEIGHT - age * AGE_WEIGHT
    if score <= 0:
        return 0.0
    return score


def score_entry(entry: HistoryEntry, now: int) -> float:
    return frecency_score(entry.visit_count, entry.typed_count, entry.last_visit_time, now)


def rank(
    entries: Iterable[HistoryEntry],
    now: int | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[RankedEntry]:
    """Highest scoring entries first, at most `limit` of them.

    Zero scores are dropped. Equal scores keep their collation order.
    """
    if now is None:
        now = now_seconds()

    scored = [RankedEntry(entry, score_entry(entry, now)) for entry in entries]
    ranked = [item for item in scored if item.score != 0.0]
    ranked.sort(key=lambda item: item.score, reverse=True)
    return ranked[:max(0, limit)]
