import logging

import pytest
from pydantic import ValidationError

from binner.config import Settings, get_settings
from binner.logging_utils import log_binning_action, setup_logging


class TestSettings:
    def test_defaults(self, settings):
        assert settings.LABEL_PRECISION == 3
        assert settings.NULL_TOKEN == "null"
        assert settings.DEFAULT_NUM_BINS == 5
        assert settings.STATS_STRATEGY == "rescan"
        assert settings.LOG_FILE is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BINNER_LABEL_PRECISION", "1")
        monkeypatch.setenv("BINNER_STATS_STRATEGY", "single-pass")
        settings = Settings()
        assert settings.LABEL_PRECISION == 1
        assert settings.STATS_STRATEGY == "single_pass"

    def test_null_token_normalised(self):
        assert Settings(NULL_TOKEN="  NA ").NULL_TOKEN == "na"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("LOG_LEVEL", "LOUD"),
            ("LABEL_PRECISION", -1),
            ("NULL_TOKEN", "   "),
            ("DEFAULT_NUM_BINS", 0),
            ("DEFAULT_STD_DEV_SIZE", 0.0),
            ("HEAD_TAIL_RATIO", 1.5),
            ("STATS_STRATEGY", "sorted"),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    def test_file_logging(self, tmp_path):
        log_file = tmp_path / "logs" / "binner.log"
        setup_logging(log_level="INFO", log_file=str(log_file))
        log_binning_action("resolve_edges", column="weight", edges=3)
        log_binning_action("histogram", column="weight", success=False, error="ParseError")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Action: resolve_edges | column=weight | edges=3 | Status: SUCCESS" in content
        assert "Action: histogram | column=weight | error=ParseError | Status: FAILED" in content

    def test_action_fields_attached_to_record(self, caplog):
        with caplog.at_level(logging.INFO, logger="binner.actions"):
            log_binning_action("build_histogram", column="weight", bins=6, binned=190)
        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.binning == {"action": "build_histogram", "column": "weight", "bins": 6, "binned": 190}

    def test_replaces_existing_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1
