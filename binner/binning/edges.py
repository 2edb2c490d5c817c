"""
Bin edge resolution.

Edges come either from literal values supplied by the caller or from the
class starts of a classification algorithm. Algorithmic edges are closed with
the next float above the maximum observation so that the maximum lands in the
last interior bin instead of the overflow bin.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..config import Settings, get_settings
from ..exceptions import (
    ConfigurationError,
    HistogramConstructionError,
    InsufficientDataError,
    ParseError,
)
from ..schemas import BinningAlgorithm
from .classification import classify

logger = logging.getLogger(__name__)

# Plain decimal or exponent notation; no underscores, hex or inf/nan words
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ResolvedEdges:
    edges: List[float]
    include_null_bucket: bool = False


def _as_observations(values: Sequence[float], column: Optional[str]) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise InsufficientDataError(column)
    return arr


def parse_edge_tokens(tokens: Iterable[str], null_token: str = "null") -> ResolvedEdges:
    """
    Parse caller-supplied edge tokens.

    Each token is a number or the (case-insensitive) null marker. Numbers are
    sorted ascending and duplicates collapse to a single edge.

    Raises:
        ParseError: a token is neither a finite number nor the null marker
        HistogramConstructionError: no numeric edge was supplied
    """
    parsed: List[float] = []
    has_null_bin = False

    for raw in tokens:
        token = raw.strip()
        if token.lower() == null_token:
            has_null_bin = True
            continue
        if not _NUMBER_PATTERN.fullmatch(token):
            raise ParseError(raw, null_token)
        value = float(token)
        if not math.isfinite(value):
            raise ParseError(raw, null_token)
        parsed.append(value)

    if not parsed:
        raise HistogramConstructionError("At least one numeric bin edge is required", edges=[])

    edges = sorted(set(parsed))
    if len(edges) < len(parsed):
        logger.warning(f"Dropped {len(parsed) - len(edges)} duplicate bin edge(s)")
    return ResolvedEdges(edges=edges, include_null_bucket=has_null_bin)


def resolve_custom_edges(
    tokens: Sequence[str],
    values: Sequence[float],
    column: Optional[str] = None,
    null_token: str = "null",
) -> ResolvedEdges:
    _as_observations(values, column)
    return parse_edge_tokens(tokens, null_token)


def resolve_algorithm_edges(
    algorithm: BinningAlgorithm,
    values: Sequence[float],
    num_bins: int = 5,
    std_dev_size: float = 1.0,
    column: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ResolvedEdges:
    """
    Derive edges from a classification algorithm.

    The class starts become the leading edges and ``nextafter(max, +inf)`` is
    appended as the closing edge. Algorithmic binning never adds a null bucket.
    """
    values = _as_observations(values, column)
    settings = settings or get_settings()

    classes = classify(algorithm, values, num_bins=num_bins, std_dev_size=std_dev_size, settings=settings)
    starts = sorted({c.bin_start for c in classes})

    closing = float(np.nextafter(np.max(values), np.inf))
    edges = [s for s in starts if s < closing] + [closing]

    logger.debug(f"{algorithm.display_name} produced {len(classes)} classes, {len(edges)} edges")
    return ResolvedEdges(edges=edges, include_null_bucket=False)


def resolve_edges(
    values: Sequence[float],
    algorithm: Optional[BinningAlgorithm] = None,
    custom_bins: Optional[Sequence[str]] = None,
    num_bins: int = 5,
    std_dev_size: float = 1.0,
    column: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ResolvedEdges:
    """Custom edges take precedence; the algorithm is only consulted without them."""
    settings = settings or get_settings()
    if custom_bins is not None:
        return resolve_custom_edges(custom_bins, values, column=column, null_token=settings.NULL_TOKEN)
    if algorithm is None:
        raise ConfigurationError("Either algorithm or custom bins must be provided", option="algorithm")
    return resolve_algorithm_edges(
        algorithm,
        values,
        num_bins=num_bins,
        std_dev_size=std_dev_size,
        column=column,
        settings=settings,
    )
