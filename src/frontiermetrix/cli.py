"""Root CLI group for frontiermetrix with global flags and command registration."""

from __future__ import annotations

import click

from frontiermetrix import __version__
from frontiermetrix.commands import register_commands
from frontiermetrix.commands._base import FmxGroup
from frontiermetrix.commands._context import AppContext
from frontiermetrix.config.discovery import ConfigError
from frontiermetrix.config.settings import FrontierSettings


@click.group(
    cls=FmxGroup,
    invoke_without_command=True,
    examples="""\
  frontiermetrix arc 40.71 -74.01 51.51 -0.13
  frontiermetrix view --class crypto --risk-min high
  frontiermetrix --json replay --ticks 24
  frontiermetrix -c ./frontiermetrix.toml view""",
)
@click.version_option(version=__version__, prog_name="frontiermetrix")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """frontiermetrix — great-circle arcs and filtered playback of asset signals."""
    ctx.ensure_object(dict)
    try:
        settings = FrontierSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
