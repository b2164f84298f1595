"""Settings assembled from CLI flags, environment and ``frontiermetrix.toml``.

Each source only fills what the ones before it leave unset:

  1. keyword arguments (the CLI's global flags)
  2. ``FRONTIERMETRIX_*`` env vars, ``__`` between section and key
  3. the config file table from :func:`~frontiermetrix.config.discovery.read_config`
  4. section model defaults
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from frontiermetrix.config.discovery import find_config, read_config
from frontiermetrix.config.models import (
    ArcsConfig,
    DataConfig,
    PipelineConfig,
    PluginsConfig,
    TimelineConfig,
)

# Parsed config file for the FrontierSettings currently being built.
_active_table: ContextVar[dict[str, Any] | None] = ContextVar("frontiermetrix_config", default=None)


class ConfigFileSource(PydanticBaseSettingsSource):
    """Serve top-level keys of an already-parsed config table."""

    def __init__(self, settings_cls: type[BaseSettings], table: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._table = table

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._table.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        known = self.settings_cls.model_fields
        return {key: value for key, value in self._table.items() if key in known}


class FrontierSettings(BaseSettings):
    """Everything a command needs to know about its environment.

    Attributes:
        project_root: Where relative paths from flags and env vars resolve;
            the config file's directory unless given explicitly.
        config_path: The config file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FRONTIERMETRIX_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    data: DataConfig = Field(default_factory=DataConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    arcs: ArcsConfig = Field(default_factory=ArcsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def data_dir(self) -> Path:
        return self.project_root / self.data.data_dir

    @property
    def plugins_dir(self) -> Path | None:
        if not self.plugins.enabled or not self.plugins.local_dir:
            return None
        return self.project_root / self.plugins.local_dir

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        table = _active_table.get() or {}
        return (init_settings, env_settings, ConfigFileSource(settings_cls, table))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> FrontierSettings:
        """Build settings for one invocation.

        An explicit *config_path* skips discovery; if it does not exist the
        run proceeds without a config file. Remaining keyword arguments are
        the global flags.

        Raises:
            ConfigError: the config file in effect is not valid TOML.
        """
        if config_path is not None:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(project_root)

        table = read_config(toml_path) if toml_path else {}
        if project_root is None:
            project_root = toml_path.resolve().parent if toml_path else Path.cwd()

        token = _active_table.set(table)
        try:
            return cls(project_root=project_root, config_path=toml_path, **cli_flags)
        finally:
            _active_table.reset(token)
