"""Tests for configuration section models."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from frontiermetrix.config.models import (
    ArcsConfig,
    DataConfig,
    PipelineConfig,
    PluginsConfig,
    TimelineConfig,
)


class TestDefaults:
    def test_data(self) -> None:
        cfg = DataConfig()
        assert cfg.data_dir == "data"
        assert cfg.signals_file == "seed_assets.json"
        assert cfg.flows_file == "seed_flows.json"

    def test_pipeline(self) -> None:
        cfg = PipelineConfig()
        assert cfg.debounce_ms == 120
        assert cfg.debounce_seconds == pytest.approx(0.12)

    def test_timeline(self) -> None:
        cfg = TimelineConfig()
        assert cfg.tick_interval_seconds == pytest.approx(0.25)
        assert cfg.step == timedelta(hours=1)
        assert cfg.haptics_enabled is True

    def test_arcs(self) -> None:
        cfg = ArcsConfig()
        assert cfg.max_segments == 64
        assert cfg.height_scale == pytest.approx(0.12)

    def test_plugins(self) -> None:
        assert PluginsConfig().local_dir == ".frontiermetrix/plugins"


class TestValidation:
    def test_negative_debounce_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PipelineConfig(debounce_ms=-1)

    def test_zero_tick_interval_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TimelineConfig(tick_interval_ms=0)

    def test_zero_segments_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ArcsConfig(max_segments=0)

    def test_frozen(self) -> None:
        cfg = ArcsConfig()
        with pytest.raises(ValidationError):
            cfg.max_segments = 10  # type: ignore[misc]
