"""Subcommand modules for frontiermetrix.

Provides register_commands() which uses deferred imports to keep
``frontiermetrix --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from frontiermetrix.commands.arc import arc
    from frontiermetrix.commands.replay import replay
    from frontiermetrix.commands.view import view

    cli.add_command(arc)
    cli.add_command(view)
    cli.add_command(replay)
