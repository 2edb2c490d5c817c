"""Pytest fixtures for the binner test suite."""

import logging
import os

import numpy as np
import polars as pl
import pytest

from binner.config import Settings, get_settings
from binner.data.reader import ColumnData


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Ignore BINNER_* variables from the outer environment and reset the settings cache."""
    for name in list(os.environ):
        if name.startswith("BINNER_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def make_column():
    """Build a ColumnData from in-memory observations."""

    def _make(values, null_count: int = 0, column: str = "value") -> ColumnData:
        arr = np.asarray(values, dtype=np.float64)
        return ColumnData(
            file="memory.parquet",
            column=column,
            dtype="Float64",
            total_rows=int(arr.size) + null_count,
            values=arr,
        )

    return _make


@pytest.fixture
def athletes_frame() -> pl.DataFrame:
    """Athlete-like data: float weight with nulls, integer height, text and boolean columns."""
    rng = np.random.default_rng(42)
    n_rows = 200
    weight = rng.normal(75, 12, n_rows).round(1).tolist()
    for i in range(0, n_rows, 20):
        weight[i] = None
    return pl.DataFrame(
        {
            "name": [f"athlete_{i}" for i in range(n_rows)],
            "weight": pl.Series("weight", weight, dtype=pl.Float64),
            "height": pl.Series("height", rng.integers(150, 210, n_rows), dtype=pl.Int32),
            "is_pro": [bool(i % 2) for i in range(n_rows)],
        }
    )


@pytest.fixture
def athletes_parquet(tmp_path, athletes_frame) -> str:
    path = tmp_path / "athletes.parquet"
    athletes_frame.write_parquet(path)
    return str(path)
