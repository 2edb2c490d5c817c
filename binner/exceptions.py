"""Exceptions raised while building a histogram."""

from typing import Any, Dict, Optional


class BinnerError(Exception):
    """Base exception for binner operations."""

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class ConfigurationError(BinnerError):
    """Raised when the requested binning mode is incomplete or invalid."""

    def __init__(self, message: str, option: Optional[str] = None):
        detail = {"option": option} if option else {}
        super().__init__(message, detail)


class ParseError(BinnerError):
    """Raised when a custom bin edge is neither numeric nor the null marker."""

    def __init__(self, token: str, null_token: str = "null"):
        super().__init__(
            f"Invalid bin value: '{token}'. Use numeric values or '{null_token}'",
            {"token": token},
        )
        self.token = token


class InsufficientDataError(BinnerError):
    """Raised when a column holds no numeric values to bin."""

    def __init__(self, column: Optional[str] = None):
        if column is None:
            message = "No numeric values to build a histogram from"
        else:
            message = f"No numeric values found in column '{column}'"
        detail = {"column": column} if column else {}
        super().__init__(message, detail)


class SourceAccessError(BinnerError):
    """Raised when the tabular source or the requested column cannot be read."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        column: Optional[str] = None,
    ):
        detail: Dict[str, Any] = {}
        if path:
            detail["path"] = path
        if column:
            detail["column"] = column
        super().__init__(message, detail)


class HistogramConstructionError(BinnerError):
    """Raised when bin edges cannot define a histogram axis."""

    def __init__(self, message: str, edges: Optional[list] = None):
        detail = {"edges": edges} if edges is not None else {}
        super().__init__(message, detail)


class SinkWriteError(BinnerError):
    """Raised when the JSON result cannot be written."""

    def __init__(self, message: str, path: Optional[str] = None):
        detail = {"path": path} if path else {}
        super().__init__(message, detail)
