"""Unit tests for settings loading and logging setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from src.common.config import (
    Environment,
    _deep_merge,
    _load_yaml_config,
    _resolve_env_vars,
    get_settings,
)
from src.common.logging import _enum_values, setup_logging
from src.normalizer.records import DropReason


@pytest.fixture
def fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    """Tests for YAML merging and ${VAR} resolution."""

    def test_deep_merge_keeps_sibling_keys(self) -> None:
        merged = _deep_merge(
            {"io": {"data_dir": "a", "csv_separator": ","}}, {"io": {"data_dir": "b"}}
        )
        assert merged == {"io": {"data_dir": "b", "csv_separator": ","}}

    def test_env_var_resolved(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESULTS_DATA_DIR", "/batches")
        resolved = _resolve_env_vars({"io": {"data_dir": "${RESULTS_DATA_DIR}"}})
        assert resolved == {"io": {"data_dir": "/batches"}}

    def test_unset_env_var_dropped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("RESULTS_DATA_DIR", raising=False)
        resolved = _resolve_env_vars({"io": {"data_dir": "${RESULTS_DATA_DIR}"}})
        assert resolved == {"io": {}}

    def test_prod_reads_locations_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.setenv("RESULTS_DATA_DIR", "/mnt/scrapes")
        monkeypatch.delenv("RESULTS_OUTPUT_PATH", raising=False)

        settings = get_settings()

        assert settings.environment is Environment.PROD
        assert settings.io.data_dir == "/mnt/scrapes"
        assert settings.io.output_path == "data/processed/results.parquet"

    def test_prod_drops_bad_date_track_by_default(self) -> None:
        config = _load_yaml_config(Environment.PROD)
        assert config["normalizer"]["strict_integrity"] is False

    def test_dev_overrides_logging(self) -> None:
        config = _load_yaml_config(Environment.DEV)
        assert config["logging"] == {"level": "DEBUG", "format": "text"}
        assert config["normalizer"]["harness_label"] == "Drafsport"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestLogging:
    """Tests for the structlog setup."""

    def test_enum_values_rendered(self) -> None:
        event = _enum_values(None, "warning", {"event": "x", "reason": DropReason.CANCELLED})
        assert event == {"event": "x", "reason": "cancelled"}

    def test_level_override(self, fresh_settings: None) -> None:
        setup_logging(level="debug", fmt="text")
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("polars").level == logging.WARNING

    def test_level_from_settings(
        self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        setup_logging()
        assert logging.getLogger().level == logging.INFO
