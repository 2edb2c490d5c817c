"""
Classification algorithms that split a set of observations into classes.

Every algorithm returns the classes in ascending order. Only ``bin_start`` is
consumed by the edge resolver; ``bin_end`` and ``count`` describe the class
over the observed range and are useful on their own.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..config import Settings, get_settings
from ..exceptions import ConfigurationError, InsufficientDataError
from ..schemas import BinningAlgorithm

logger = logging.getLogger(__name__)


@dataclass
class ClassBin:
    bin_start: float
    bin_end: float
    count: int = 0


def _prepare(values: Sequence[float]) -> np.ndarray:
    arr = np.sort(np.asarray(values, dtype=np.float64))
    if arr.size == 0:
        raise InsufficientDataError()
    return arr


def _check_num_bins(num_bins: int) -> None:
    if num_bins < 1:
        raise ConfigurationError(
            f"Number of bins must be at least 1, got {num_bins}", option="num_bins"
        )


def _to_class_bins(starts: Sequence[float], sorted_values: np.ndarray) -> List[ClassBin]:
    """Pair each start with the next one (the last class ends at the maximum) and count members."""
    starts_arr = np.unique(np.asarray(starts, dtype=np.float64))
    maximum = float(sorted_values[-1])
    ends = np.append(starts_arr[1:], maximum)

    # Index of the class each value falls into; the maximum belongs to the last class
    idx = np.searchsorted(starts_arr, sorted_values, side="right") - 1
    counts = np.bincount(np.clip(idx, 0, None), minlength=starts_arr.size)

    return [
        ClassBin(bin_start=float(s), bin_end=float(e), count=int(c))
        for s, e, c in zip(starts_arr, ends, counts)
    ]


def _ssd(s1: np.ndarray, s2: np.ndarray, i: np.ndarray, j: int) -> np.ndarray:
    """Sum of squared deviations of ``x[i..j]`` from their mean, for every start in ``i``."""
    cnt = j - i + 1
    total = s1[j + 1] - s1[i]
    return (s2[j + 1] - s2[i]) - total * total / cnt


def jenks(
    num_bins: int,
    values: Sequence[float],
    max_sample: int = 5000,
    seed: int = 42,
) -> List[ClassBin]:
    """
    Jenks natural breaks (Fisher's exact optimisation).

    Finds the partition of the sorted values into ``num_bins`` contiguous
    classes that minimises the total within-class squared deviation. Equal
    values are never split across two classes, so ``num_bins`` is clamped to
    the number of distinct values.

    Args:
        num_bins: Target number of classes
        values: Observations
        max_sample: Inputs larger than this are reduced to a seeded random
            sample that always keeps the minimum and maximum
        seed: Seed of the sampling generator
    """
    _check_num_bins(num_bins)
    arr = _prepare(values)

    x = arr
    if arr.size > max_sample:
        rng = np.random.default_rng(seed)
        inner = rng.choice(arr[1:-1], size=max(max_sample - 2, 0), replace=False)
        x = np.sort(np.concatenate([arr[:1], inner, arr[-1:]]))
        logger.debug(f"Jenks input sampled from {arr.size} to {x.size} values")

    k = min(num_bins, int(np.unique(x).size))
    if k == 1:
        return _to_class_bins([arr[0]], arr)

    n = x.size
    centered = x - x.mean()
    s1 = np.concatenate([[0.0], np.cumsum(centered)])
    s2 = np.concatenate([[0.0], np.cumsum(centered * centered)])

    # A class may only start where the value changes
    valid_start = np.ones(n, dtype=bool)
    valid_start[1:] = x[1:] > x[:-1]

    cost = np.full((k, n), np.inf)
    back = np.zeros((k, n), dtype=np.int64)
    ends = np.arange(n)
    cost[0] = (s2[ends + 1] - s2[0]) - (s1[ends + 1] - s1[0]) ** 2 / (ends + 1)

    for c in range(1, k):
        for j in range(c, n):
            starts = np.arange(c, j + 1)
            candidates = cost[c - 1, starts - 1] + _ssd(s1, s2, starts, j)
            candidates = np.where(valid_start[starts], candidates, np.inf)
            best = int(np.argmin(candidates))
            cost[c, j] = candidates[best]
            back[c, j] = starts[best]

    breaks = []
    j = n - 1
    for c in range(k - 1, 0, -1):
        i = int(back[c, j])
        breaks.append(float(x[i]))
        j = i - 1
    breaks.append(float(arr[0]))
    breaks.reverse()

    return _to_class_bins(breaks, arr)


def quantile(num_bins: int, values: Sequence[float]) -> List[ClassBin]:
    """Equal-count classes: class ``i`` starts at sorted position ``i * n // num_bins``."""
    _check_num_bins(num_bins)
    arr = _prepare(values)
    n = arr.size
    starts = [arr[(i * n) // num_bins] for i in range(num_bins)]
    return _to_class_bins(starts, arr)


def equal_interval(num_bins: int, values: Sequence[float]) -> List[ClassBin]:
    _check_num_bins(num_bins)
    arr = _prepare(values)
    lo, hi = float(arr[0]), float(arr[-1])
    if hi == lo:
        return _to_class_bins([lo], arr)
    # Interpolate so that ranges wider than the float maximum do not overflow
    starts = [lo * (1 - i / num_bins) + hi * (i / num_bins) for i in range(num_bins)]
    return _to_class_bins(starts, arr)


def standard_deviation(std_dev_size: float, values: Sequence[float]) -> List[ClassBin]:
    """
    Classes of width ``std_dev_size`` standard deviations, aligned on the mean.

    Boundaries sit at ``mean + j * width`` for every integer ``j`` that lands
    strictly above the minimum and not above the maximum; the first class
    starts at the minimum.
    """
    if not std_dev_size > 0:
        raise ConfigurationError(
            f"Standard deviation size must be greater than zero, got {std_dev_size}",
            option="std_dev_size",
        )
    arr = _prepare(values)
    lo, hi = float(arr[0]), float(arr[-1])
    if hi == lo:
        return _to_class_bins([lo], arr)

    # Work relative to the largest magnitude so that wide ranges stay finite
    scale = max(abs(lo), abs(hi))
    scaled = arr / scale
    mean = float(scaled.mean())
    width = float(scaled.std()) * std_dev_size
    if width == 0:
        return _to_class_bins([lo], arr)

    first = math.floor((lo / scale - mean) / width) + 1
    last = math.floor((hi / scale - mean) / width)
    starts = [lo]
    for j in range(first, last + 1):
        boundary = (mean + j * width) * scale
        if lo < boundary <= hi:
            starts.append(boundary)
    return _to_class_bins(starts, arr)


def head_tail(values: Sequence[float], ratio: float = 0.4) -> List[ClassBin]:
    """
    Head/tail breaks for heavy-tailed data.

    Splits at the mean and keeps splitting the head (values above the mean)
    while the head holds no more than ``ratio`` of the values being split.
    """
    arr = _prepare(values)
    starts = [float(arr[0])]
    subset = arr
    while subset.size > 1:
        mean = float(subset.mean())
        head = subset[subset > mean]
        if head.size == 0:
            break
        starts.append(mean)
        if head.size / subset.size > ratio:
            break
        subset = head
    return _to_class_bins(starts, arr)


def classify(
    algorithm: BinningAlgorithm,
    values: Sequence[float],
    num_bins: int = 5,
    std_dev_size: float = 1.0,
    settings: Optional[Settings] = None,
) -> List[ClassBin]:
    """Dispatch to the classification algorithm named by ``algorithm``."""
    settings = settings or get_settings()
    max_sample = settings.JENKS_MAX_SAMPLE
    seed = settings.RANDOM_SEED
    ratio = settings.HEAD_TAIL_RATIO

    if algorithm == BinningAlgorithm.JENKS:
        return jenks(num_bins, values, max_sample=max_sample, seed=seed)
    if algorithm == BinningAlgorithm.QUANTILE:
        return quantile(num_bins, values)
    if algorithm == BinningAlgorithm.EQUAL_INTERVAL:
        return equal_interval(num_bins, values)
    if algorithm == BinningAlgorithm.STANDARD_DEVIATION:
        return standard_deviation(std_dev_size, values)
    if algorithm == BinningAlgorithm.HEAD_TAIL:
        return head_tail(values, ratio=ratio)
    raise ConfigurationError(f"Unsupported binning algorithm: {algorithm}", option="algorithm")
