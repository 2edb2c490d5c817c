from .classification import ClassBin, classify
from .edges import ResolvedEdges, parse_edge_tokens, resolve_edges
from .histogram import VariableHistogram, build_bins, null_bucket
from .intervals import Interior, Interval, Overflow, Underflow

__all__ = [
    "ClassBin",
    "classify",
    "ResolvedEdges",
    "parse_edge_tokens",
    "resolve_edges",
    "VariableHistogram",
    "build_bins",
    "null_bucket",
    "Interior",
    "Interval",
    "Overflow",
    "Underflow",
]
