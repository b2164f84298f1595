"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from frontiermetrix.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from frontiermetrix.config.settings import FrontierSettings
    from frontiermetrix.plugins.event_bus import EventBus
    from frontiermetrix.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  Plugins are discovered
    on first use of :attr:`event_bus`, so ``--help`` and ``--version``
    never import plugin code.
    """

    def __init__(self, settings: FrontierSettings) -> None:
        self.settings = settings
        self._event_bus: EventBus | None = None
        self._plugins_loaded = False

        # Configure structured logging
        from frontiermetrix.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def event_bus(self) -> EventBus | None:
        """Event bus over the discovered plugins, or None when plugins are disabled."""
        if not self._plugins_loaded:
            self._plugins_loaded = True
            if self.settings.plugins.enabled:
                from frontiermetrix.plugins import EventBus, PluginManager

                pm = PluginManager()
                pm.load(local_dir=self.settings.plugins_dir)
                self._event_bus = EventBus(pm)
        return self._event_bus

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
