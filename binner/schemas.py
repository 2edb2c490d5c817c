from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BinningAlgorithm(str, Enum):
    JENKS = "jenks"
    QUANTILE = "quantile"
    EQUAL_INTERVAL = "equal-interval"
    STANDARD_DEVIATION = "standard-deviation"
    HEAD_TAIL = "head-tail"

    @property
    def display_name(self) -> str:
        """Name reported in the histogram metadata, e.g. ``EqualInterval``."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    BinningAlgorithm.JENKS: "Jenks",
    BinningAlgorithm.QUANTILE: "Quantile",
    BinningAlgorithm.EQUAL_INTERVAL: "EqualInterval",
    BinningAlgorithm.STANDARD_DEVIATION: "StandardDeviation",
    BinningAlgorithm.HEAD_TAIL: "HeadTail",
}


class BinningRequest(BaseModel):
    """How the caller wants the bin edges derived."""

    algorithm: Optional[BinningAlgorithm] = None
    custom_bins: Optional[List[str]] = None
    num_bins: int = 5
    std_dev_size: float = 1.0

    @property
    def uses_custom_bins(self) -> bool:
        return self.custom_bins is not None


class HistogramBin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bin_label: str
    from_: Optional[float] = Field(default=None, alias="from")
    to: Optional[float] = None
    count: int = Field(ge=0)
    min: Optional[float] = None
    max: Optional[float] = None


class HistogramMetadata(BaseModel):
    file: str
    column: str
    algorithm: Optional[str] = None
    num_bins: Optional[int] = None
    std_dev_size: Optional[float] = None
    total_rows: int
    numeric_values: int
    null_values: int
    bin_edges: List[float] = Field(default_factory=list)


class HistogramResult(BaseModel):
    metadata: HistogramMetadata
    bins: List[HistogramBin] = Field(default_factory=list)
