"""
Histogram pipeline: resolve edges, fill, aggregate, assemble.

``build_histogram`` is a pure function of the extracted column and the
binning request. ``run`` adds the file read and the JSON write around it.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .binning.edges import ResolvedEdges, resolve_edges
from .binning.histogram import VariableHistogram, build_bins, null_bucket
from .config import Settings, get_settings
from .data.reader import ColumnData, read_column
from .exceptions import ConfigurationError, InsufficientDataError
from .logging_utils import log_binning_action
from .output import write_result
from .schemas import (
    BinningAlgorithm,
    BinningRequest,
    HistogramBin,
    HistogramMetadata,
    HistogramResult,
)

logger = logging.getLogger(__name__)


def validate_request(request: BinningRequest) -> None:
    if request.custom_bins is None and request.algorithm is None:
        raise ConfigurationError("Either algorithm or custom bins must be provided", option="algorithm")
    if request.custom_bins is None:
        if request.num_bins < 1:
            raise ConfigurationError(
                f"Number of bins must be at least 1, got {request.num_bins}", option="num_bins"
            )
        if request.algorithm == BinningAlgorithm.STANDARD_DEVIATION and not request.std_dev_size > 0:
            raise ConfigurationError(
                f"Standard deviation size must be greater than zero, got {request.std_dev_size}",
                option="std_dev_size",
            )


def build_metadata(data: ColumnData, request: BinningRequest, edges: List[float]) -> HistogramMetadata:
    """Custom edges report no algorithm; ``std_dev_size`` only accompanies StandardDeviation."""
    algorithm = None if request.uses_custom_bins else request.algorithm
    return HistogramMetadata(
        file=data.file,
        column=data.column,
        algorithm=algorithm.display_name if algorithm else None,
        num_bins=request.num_bins if algorithm else None,
        std_dev_size=(
            request.std_dev_size if algorithm == BinningAlgorithm.STANDARD_DEVIATION else None
        ),
        total_rows=data.total_rows,
        numeric_values=data.numeric_values,
        null_values=data.null_count,
        bin_edges=list(edges),
    )


def assemble_result(
    metadata: HistogramMetadata,
    bins: List[HistogramBin],
    null_bin: Optional[HistogramBin] = None,
) -> HistogramResult:
    ordered = list(bins)
    if null_bin is not None:
        ordered.append(null_bin)
    return HistogramResult(metadata=metadata, bins=ordered)


def build_histogram(
    data: ColumnData,
    request: BinningRequest,
    settings: Optional[Settings] = None,
) -> HistogramResult:
    """
    Build the histogram result for an extracted column.

    Raises:
        ConfigurationError: neither an algorithm nor custom bins were given
        InsufficientDataError: the column has no numeric values
        ParseError: a custom edge is not a number or the null marker
        HistogramConstructionError: the edges cannot form a histogram axis
    """
    settings = settings or get_settings()
    validate_request(request)

    if data.numeric_values == 0:
        raise InsufficientDataError(data.column)

    resolved: ResolvedEdges = resolve_edges(
        data.values,
        algorithm=request.algorithm,
        custom_bins=request.custom_bins,
        num_bins=request.num_bins,
        std_dev_size=request.std_dev_size,
        column=data.column,
        settings=settings,
    )
    log_binning_action(
        "resolve_edges",
        column=data.column,
        edges=len(resolved.edges),
        null_bucket=resolved.include_null_bucket,
    )

    histogram = VariableHistogram(resolved.edges).fill(data.values)
    bins = build_bins(
        histogram,
        data.values,
        precision=settings.LABEL_PRECISION,
        strategy=settings.STATS_STRATEGY,
    )
    null_bin = null_bucket(resolved.include_null_bucket, data.null_count)

    metadata = build_metadata(data, request, resolved.edges)
    result = assemble_result(metadata, bins, null_bin)
    log_binning_action(
        "build_histogram",
        column=data.column,
        bins=len(result.bins),
        binned=histogram.total,
        nulls=data.null_count,
    )
    return result


def run(
    file: Union[str, Path],
    column: str,
    request: BinningRequest,
    output: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
) -> HistogramResult:
    """Read ``column`` from ``file``, build its histogram and write the JSON result."""
    settings = settings or get_settings()
    validate_request(request)

    data = read_column(file, column)
    result = build_histogram(data, request, settings=settings)
    write_result(result, output)
    return result
