"""The three interval shapes a variable-width histogram axis produces."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Underflow:
    """Values below the first edge."""

    end: float


@dataclass(frozen=True)
class Interior:
    """Half-open ``[start, end)`` bin between two consecutive edges."""

    start: float
    end: float


@dataclass(frozen=True)
class Overflow:
    """Values at or above the last edge."""

    start: float


Interval = Union[Underflow, Interior, Overflow]


def contains_mask(interval: Interval, values: np.ndarray) -> np.ndarray:
    """Boolean mask of the values that fall inside ``interval``."""
    if isinstance(interval, Underflow):
        return values < interval.end
    if isinstance(interval, Overflow):
        return values >= interval.start
    return (values >= interval.start) & (values < interval.end)


def format_label(interval: Interval, precision: int = 3) -> str:
    if isinstance(interval, Underflow):
        return f"< {interval.end:.{precision}f}"
    if isinstance(interval, Overflow):
        return f">= {interval.start:.{precision}f}"
    return f"[{interval.start:.{precision}f}, {interval.end:.{precision}f})"


def bounds(interval: Interval) -> Tuple[Optional[float], Optional[float]]:
    """``(from, to)`` pair with ``None`` on the open side."""
    if isinstance(interval, Underflow):
        return None, interval.end
    if isinstance(interval, Overflow):
        return interval.start, None
    return interval.start, interval.end
