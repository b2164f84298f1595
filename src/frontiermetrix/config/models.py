"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, frontiermetrix.toml only
contains overrides.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field


class DataConfig(BaseModel):
    """[data] section."""

    model_config = {"frozen": True}

    data_dir: str = "data"
    signals_file: str = "seed_assets.json"
    flows_file: str = "seed_flows.json"


class PipelineConfig(BaseModel):
    """[pipeline] section."""

    model_config = {"frozen": True}

    debounce_ms: int = Field(default=120, ge=0)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class TimelineConfig(BaseModel):
    """[timeline] section."""

    model_config = {"frozen": True}

    tick_interval_ms: int = Field(default=250, gt=0)
    step_minutes: int = Field(default=60, gt=0)
    haptics_enabled: bool = True

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000

    @property
    def step(self) -> timedelta:
        return timedelta(minutes=self.step_minutes)


class ArcsConfig(BaseModel):
    """[arcs] section."""

    model_config = {"frozen": True}

    max_segments: int = Field(default=64, ge=1)
    height_scale: float = Field(default=0.12, ge=0)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str | None = ".frontiermetrix/plugins"

