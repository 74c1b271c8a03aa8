"""Per-day instance counts over an analysis window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np

from ..history.models import InstanceSetHistory, start_of_day
from .filters import FilterState, Resolver, matches_toggles


@dataclass(frozen=True)
class HistogramEntry:
    timestamp: datetime  # midnight UTC of the day
    value: int


def build_histogram(
    history: InstanceSetHistory,
    resolve: Resolver,
    state: FilterState,
) -> list[HistogramEntry]:
    """Count toggle-qualifying instances for every day of the window.

    A day counts an instance when the instance's interval overlaps it. Days
    with a count of zero are omitted, so the result is empty when nothing
    qualifies. The date selection never applies here.

    Per-instance day spans are accumulated into a difference array and
    prefix-summed, so the cost is O(instances + days).
    """
    days = history.days()
    if not days:
        return []
    first_day = days[0]
    last_index = len(days) - 1

    qualifying = [i for i in history if matches_toggles(state, i, resolve(i))]
    if not qualifying:
        return []

    first = np.array([_day_index(i.start, first_day) for i in qualifying], dtype=np.int64)
    last = np.array([_day_index(i.end, first_day) for i in qualifying], dtype=np.int64)
    first = np.clip(first, 0, last_index)
    last = np.clip(last, 0, last_index)

    deltas = np.zeros(len(days) + 1, dtype=np.int64)
    np.add.at(deltas, first, 1)
    np.add.at(deltas, last + 1, -1)
    counts = np.cumsum(deltas[:-1])

    return [
        HistogramEntry(timestamp=days[idx], value=int(counts[idx]))
        for idx in np.flatnonzero(counts > 0)
    ]


def _day_index(timestamp: datetime, first_day: datetime) -> int:
    return (start_of_day(timestamp) - first_day).days
