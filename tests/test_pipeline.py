import json

import numpy as np
import pytest

from binner.config import Settings
from binner.exceptions import (
    ConfigurationError,
    InsufficientDataError,
    ParseError,
    SourceAccessError,
)
from binner.pipeline import build_histogram, run
from binner.schemas import BinningAlgorithm, BinningRequest


def custom(*tokens):
    return BinningRequest(custom_bins=list(tokens))


class TestScenarios:
    def test_custom_edges_split_observations(self, make_column, settings):
        result = build_histogram(make_column([1, 2, 3, 9]), custom("1", "5"), settings)

        assert result.metadata.bin_edges == [1.0, 5.0]
        underflow, interior, overflow = result.bins
        assert underflow.count == 0
        assert (interior.bin_label, interior.count) == ("[1.000, 5.000)", 3)
        assert (interior.min, interior.max) == (1.0, 3.0)
        assert (overflow.bin_label, overflow.count) == (">= 5.000", 1)
        assert overflow.min == overflow.max == 9.0

    def test_all_null_column(self, make_column, settings):
        with pytest.raises(InsufficientDataError):
            build_histogram(make_column([], null_count=4), custom("1"), settings)

    def test_single_edge_with_null_bucket(self, make_column, settings):
        data = make_column([5, 5, 5], null_count=2)
        result = build_histogram(data, custom("5", "null"), settings)

        assert [b.bin_label for b in result.bins] == ["< 5.000", ">= 5.000", "null"]
        underflow, overflow, nulls = result.bins
        assert underflow.count == 0
        assert overflow.count == 3
        assert overflow.min == overflow.max == 5.0
        assert nulls.count == 2
        assert nulls.from_ is None and nulls.min is None


class TestMetadata:
    def test_custom_edges_report_no_algorithm(self, make_column, settings):
        request = BinningRequest(
            algorithm=BinningAlgorithm.JENKS, custom_bins=["1", "5"], num_bins=3
        )
        meta = build_histogram(make_column([1, 2, 3, 9], null_count=1), request, settings).metadata

        assert meta.algorithm is None
        assert meta.num_bins is None
        assert meta.std_dev_size is None
        assert (meta.total_rows, meta.numeric_values, meta.null_values) == (5, 4, 1)
        assert meta.file == "memory.parquet"
        assert meta.column == "value"

    def test_jenks_metadata_and_bin_count(self, make_column, settings):
        values = np.random.default_rng(0).normal(70, 10, 300)
        request = BinningRequest(algorithm=BinningAlgorithm.JENKS, num_bins=4)
        result = build_histogram(make_column(values), request, settings)

        assert result.metadata.algorithm == "Jenks"
        assert result.metadata.num_bins == 4
        assert result.metadata.std_dev_size is None
        assert len(result.bins) == 6

    def test_std_dev_size_only_for_standard_deviation(self, make_column, settings):
        values = np.random.default_rng(0).normal(70, 10, 300)
        request = BinningRequest(algorithm=BinningAlgorithm.STANDARD_DEVIATION, std_dev_size=1.5)
        meta = build_histogram(make_column(values), request, settings).metadata
        assert meta.algorithm == "StandardDeviation"
        assert meta.std_dev_size == 1.5
        assert meta.num_bins == 5

    def test_head_tail_display_name(self, make_column, settings):
        request = BinningRequest(algorithm=BinningAlgorithm.HEAD_TAIL)
        meta = build_histogram(make_column([1, 1, 1, 2, 10]), request, settings).metadata
        assert meta.algorithm == "HeadTail"
        assert meta.std_dev_size is None


class TestProperties:
    @pytest.mark.parametrize("algorithm", list(BinningAlgorithm))
    def test_algorithmic_edges_never_overflow(self, algorithm, make_column, settings):
        values = np.random.default_rng(21).lognormal(3, 1, 500)
        request = BinningRequest(algorithm=algorithm, num_bins=5)
        result = build_histogram(make_column(values, null_count=7), request, settings)

        assert result.bins[0].count == 0
        assert result.bins[-1].bin_label.startswith(">=")
        assert result.bins[-1].count == 0
        assert sum(b.count for b in result.bins) == values.size
        assert result.bins[-2].max == values.max()

    @pytest.mark.parametrize("algorithm", list(BinningAlgorithm))
    def test_bins_align_with_edges(self, algorithm, make_column, settings):
        values = np.random.default_rng(4).uniform(0, 100, 200)
        result = build_histogram(make_column(values), BinningRequest(algorithm=algorithm), settings)

        edges = result.metadata.bin_edges
        assert len(result.bins) == len(edges) + 1
        assert edges == sorted(edges)
        interior = result.bins[1:-1]
        assert [b.from_ for b in interior] == edges[:-1]
        assert [b.to for b in interior] == edges[1:]

    @pytest.mark.parametrize(
        "tokens, null_count, expected",
        [
            (("0", "10", "null"), 3, 3),
            (("0", "10", "null"), 0, None),
            (("0", "10"), 3, None),
        ],
    )
    def test_null_bucket_round_trip(self, make_column, settings, tokens, null_count, expected):
        data = make_column([1, 2, 3], null_count=null_count)
        result = build_histogram(data, custom(*tokens), settings)
        null_bins = [b for b in result.bins if b.bin_label == "null"]

        if expected is None:
            assert null_bins == []
        else:
            assert null_bins[0].count == expected
            assert null_bins[0].count == result.metadata.total_rows - result.metadata.numeric_values
            assert result.bins[-1].bin_label == "null"
        assert result.metadata.null_values == null_count

    def test_single_pass_strategy_matches(self, make_column):
        values = np.random.default_rng(8).normal(0, 1, 400)
        request = BinningRequest(algorithm=BinningAlgorithm.QUANTILE, num_bins=7)
        rescan = build_histogram(make_column(values), request, Settings(STATS_STRATEGY="rescan"))
        single = build_histogram(make_column(values), request, Settings(STATS_STRATEGY="single_pass"))
        assert rescan.model_dump() == single.model_dump()

    def test_label_precision_setting(self, make_column):
        result = build_histogram(make_column([1.0]), custom("0.5", "2"), Settings(LABEL_PRECISION=1))
        assert result.bins[1].bin_label == "[0.5, 2.0)"


class TestValidation:
    def test_requires_algorithm_or_bins(self, make_column, settings):
        with pytest.raises(ConfigurationError):
            build_histogram(make_column([1.0]), BinningRequest(), settings)

    def test_rejects_zero_bins(self, make_column, settings):
        request = BinningRequest(algorithm=BinningAlgorithm.JENKS, num_bins=0)
        with pytest.raises(ConfigurationError):
            build_histogram(make_column([1.0, 2.0]), request, settings)

    def test_rejects_non_positive_std_dev_size(self, make_column, settings):
        request = BinningRequest(algorithm=BinningAlgorithm.STANDARD_DEVIATION, std_dev_size=-1.0)
        with pytest.raises(ConfigurationError):
            build_histogram(make_column([1.0, 2.0]), request, settings)

    def test_bad_custom_token(self, make_column, settings):
        with pytest.raises(ParseError):
            build_histogram(make_column([1.0]), custom("not", "numeric", "values"), settings)


class TestRun:
    def test_writes_json_file(self, athletes_parquet, tmp_path, settings):
        output = tmp_path / "out" / "result.json"
        request = BinningRequest(algorithm=BinningAlgorithm.QUANTILE, num_bins=4)
        result = run(athletes_parquet, "weight", request, output=output, settings=settings)

        saved = json.loads(output.read_text(encoding="utf-8"))
        assert saved["metadata"]["algorithm"] == "Quantile"
        assert saved["metadata"]["null_values"] == 10
        assert saved["metadata"]["total_rows"] == 200
        assert "from" in saved["bins"][0]
        assert len(saved["bins"]) == len(result.bins) == 6

    def test_overwrites_existing_file(self, athletes_parquet, tmp_path, settings):
        output = tmp_path / "result.json"
        output.write_text("stale", encoding="utf-8")
        run(athletes_parquet, "height", custom("160", "180"), output=output, settings=settings)
        assert json.loads(output.read_text(encoding="utf-8"))["metadata"]["column"] == "height"

    def test_prints_to_stdout(self, athletes_parquet, capsys, settings):
        run(athletes_parquet, "weight", custom("60", "80", "100", "null"), settings=settings)
        payload = json.loads(capsys.readouterr().out)
        assert payload["metadata"]["algorithm"] is None
        assert payload["bins"][-1] == {
            "bin_label": "null",
            "from": None,
            "to": None,
            "count": 10,
            "min": None,
            "max": None,
        }

    def test_missing_file(self, tmp_path, settings):
        with pytest.raises(SourceAccessError):
            run(tmp_path / "missing.parquet", "weight", custom("1"), settings=settings)

    def test_configuration_checked_before_reading(self, tmp_path, settings):
        with pytest.raises(ConfigurationError):
            run(tmp_path / "missing.parquet", "weight", BinningRequest(), settings=settings)
