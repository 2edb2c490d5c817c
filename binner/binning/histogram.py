"""
Histogram accumulation over a variable-width axis.

An axis with ``k`` edges has ``k + 1`` slots: slot 0 is the underflow bin,
slots ``1 .. k-1`` are the interior bins and slot ``k`` is the overflow bin.
Every slot is reported, including empty ones, so the bins stay aligned with
the edge list.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import HistogramConstructionError
from ..schemas import HistogramBin
from .intervals import Interior, Interval, Overflow, Underflow, bounds, contains_mask, format_label

logger = logging.getLogger(__name__)

STATS_STRATEGIES = ("rescan", "single_pass")


class VariableHistogram:
    """Counts, plus running min/max, per slot of a variable-width axis."""

    def __init__(self, edges: Sequence[float]):
        arr = np.asarray(list(edges), dtype=np.float64)
        if arr.size == 0:
            raise HistogramConstructionError("Histogram requires at least one bin edge", edges=[])
        if not np.all(np.isfinite(arr)):
            raise HistogramConstructionError("Bin edges must be finite numbers", edges=arr.tolist())
        if np.any(np.diff(arr) <= 0):
            raise HistogramConstructionError("Bin edges must be strictly increasing", edges=arr.tolist())

        self.edges = arr
        self.counts = np.zeros(arr.size + 1, dtype=np.int64)
        self._mins = np.full(arr.size + 1, np.inf)
        self._maxs = np.full(arr.size + 1, -np.inf)

    def __len__(self) -> int:
        return self.counts.size

    def slot_index(self, values: np.ndarray) -> np.ndarray:
        """Slot of each value: ``edges[i-1] <= v < edges[i]`` maps to slot ``i``."""
        return np.searchsorted(self.edges, values, side="right")

    def fill(self, values: Sequence[float]) -> "VariableHistogram":
        arr = np.asarray(values, dtype=np.float64)
        if arr.size == 0:
            return self
        idx = self.slot_index(arr)
        self.counts += np.bincount(idx, minlength=self.counts.size)
        np.minimum.at(self._mins, idx, arr)
        np.maximum.at(self._maxs, idx, arr)
        return self

    def interval(self, slot: int) -> Interval:
        if slot == 0:
            return Underflow(end=float(self.edges[0]))
        if slot == self.edges.size:
            return Overflow(start=float(self.edges[-1]))
        return Interior(start=float(self.edges[slot - 1]), end=float(self.edges[slot]))

    def extrema(self, slot: int) -> Tuple[Optional[float], Optional[float]]:
        """Running ``(min, max)`` of the values filled into ``slot``."""
        if self.counts[slot] == 0:
            return None, None
        return float(self._mins[slot]), float(self._maxs[slot])

    def __iter__(self) -> Iterator[Tuple[Interval, int]]:
        for slot in range(self.counts.size):
            yield self.interval(slot), int(self.counts[slot])

    @property
    def total(self) -> int:
        return int(self.counts.sum())


def interval_stats(interval: Interval, values: np.ndarray) -> Tuple[Optional[float], Optional[float]]:
    """Min and max of the values inside ``interval``, found by scanning all values."""
    members = values[contains_mask(interval, values)]
    if members.size == 0:
        return None, None
    return float(members.min()), float(members.max())


def build_bins(
    histogram: VariableHistogram,
    values: Sequence[float],
    precision: int = 3,
    strategy: str = "rescan",
) -> List[HistogramBin]:
    """
    Turn a filled histogram into labelled bin records.

    ``strategy`` picks how per-bin min/max are found: ``rescan`` filters the
    observations once per bin, ``single_pass`` reuses the extrema tracked by
    ``VariableHistogram.fill``. Both give the same records.
    """
    if strategy not in STATS_STRATEGIES:
        raise ValueError(f"Unknown statistics strategy: {strategy}")

    arr = np.asarray(values, dtype=np.float64)
    bins = []
    for slot, (interval, count) in enumerate(histogram):
        if strategy == "single_pass":
            lo, hi = histogram.extrema(slot)
        else:
            lo, hi = interval_stats(interval, arr)
        start, end = bounds(interval)
        bins.append(
            HistogramBin(
                bin_label=format_label(interval, precision),
                from_=start,
                to=end,
                count=count,
                min=lo,
                max=hi,
            )
        )
    return bins


def null_bucket(include: bool, null_count: int) -> Optional[HistogramBin]:
    """The synthetic ``null`` bin, or ``None`` when not requested or nothing is missing."""
    if not include or null_count <= 0:
        return None
    return HistogramBin(bin_label="null", count=null_count)
