from .exceptions import (
    BinnerError,
    ConfigurationError,
    HistogramConstructionError,
    InsufficientDataError,
    ParseError,
    SinkWriteError,
    SourceAccessError,
)
from .pipeline import build_histogram, run
from .schemas import BinningAlgorithm, BinningRequest, HistogramBin, HistogramMetadata, HistogramResult

__version__ = "1.0.0"

__all__ = [
    "BinnerError",
    "ConfigurationError",
    "HistogramConstructionError",
    "InsufficientDataError",
    "ParseError",
    "SinkWriteError",
    "SourceAccessError",
    "build_histogram",
    "run",
    "BinningAlgorithm",
    "BinningRequest",
    "HistogramBin",
    "HistogramMetadata",
    "HistogramResult",
]
