"""
Column extraction from tabular files.

Polars is used for loading; pandas is the fallback when polars cannot parse a
file (and the only loader for Excel workbooks).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
import pandas as pd
import polars as pl

from ..exceptions import SourceAccessError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class ColumnData:
    file: str
    column: str
    dtype: str
    total_rows: int
    values: np.ndarray = field(repr=False)

    @property
    def numeric_values(self) -> int:
        return int(self.values.size)

    @property
    def null_count(self) -> int:
        """Rows that are null, non-finite or of a non-numeric type."""
        return self.total_rows - self.numeric_values


def is_numeric_dtype(dtype: pl.DataType) -> bool:
    """Signed/unsigned integers and floats of any width are numeric; booleans are not."""
    return dtype.is_integer() or dtype.is_float()


def _scan_polars(path: str) -> pl.LazyFrame:
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return pl.scan_csv(path, ignore_errors=True)
    if suffix in (".ndjson", ".jsonl"):
        return pl.scan_ndjson(path)
    if suffix == ".json":
        return pl.read_json(path).lazy()
    if suffix in (".xlsx", ".xls"):
        return pl.from_pandas(_load_pandas(path)).lazy()
    return pl.scan_parquet(path)


def _load_pandas(path: str) -> pd.DataFrame:
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".json":
        return pd.read_json(path)
    if suffix in (".ndjson", ".jsonl"):
        return pd.read_json(path, lines=True)
    if suffix in (".xlsx", ".xls"):
        return pd.read_excel(path)
    return pd.read_parquet(path)


def open_source(path: PathLike) -> Tuple[pl.LazyFrame, pl.Schema]:
    """
    Open a tabular file lazily and resolve its schema.

    Raises:
        SourceAccessError: the file is missing or neither loader can read it
    """
    path_str = str(path)
    if not Path(path_str).is_file():
        raise SourceAccessError(f"File not found: {path_str}", path=path_str)

    try:
        lf = _scan_polars(path_str)
        return lf, lf.collect_schema()
    except Exception as pl_err:
        logger.warning(f"Polars load failed for {path_str}: {pl_err}. Falling back to Pandas.")
        try:
            lf = pl.from_pandas(_load_pandas(path_str)).lazy()
            return lf, lf.collect_schema()
        except Exception as pd_err:
            raise SourceAccessError(
                f"Failed to read {path_str}: {pd_err}", path=path_str
            ) from pd_err


def list_columns(path: PathLike) -> List[str]:
    """Column names of a tabular file, read from its schema only."""
    _, schema = open_source(path)
    return list(schema.names())


def read_column(path: PathLike, column: str) -> ColumnData:
    """
    Extract one column as finite float64 observations.

    Numeric columns are cast to float64 and stripped of nulls, NaN and
    infinities. A column of any other type yields no observations; all of its
    rows count as nulls.

    Raises:
        SourceAccessError: the file cannot be read or the column does not exist
    """
    path_str = str(path)
    lf, schema = open_source(path_str)

    if column not in schema.names():
        available = ", ".join(schema.names())
        raise SourceAccessError(
            f"Column '{column}' not found in {path_str}. Available columns: {available}",
            path=path_str,
            column=column,
        )

    try:
        df = lf.select(pl.col(column)).collect()
    except Exception as e:
        raise SourceAccessError(
            f"Failed to read column '{column}' from {path_str}: {e}", path=path_str, column=column
        ) from e

    series = df.get_column(column)
    dtype = series.dtype

    if is_numeric_dtype(dtype):
        values = series.cast(pl.Float64).drop_nulls().to_numpy()
        values = values[np.isfinite(values)]
    else:
        logger.warning(f"Column '{column}' has non-numeric type {dtype}; all rows count as nulls")
        values = np.empty(0, dtype=np.float64)

    data = ColumnData(
        file=path_str,
        column=column,
        dtype=str(dtype),
        total_rows=df.height,
        values=np.ascontiguousarray(values, dtype=np.float64),
    )
    logger.info(
        f"Read column '{column}' from {path_str}: {data.total_rows} rows, "
        f"{data.numeric_values} numeric, {data.null_count} null"
    )
    return data
