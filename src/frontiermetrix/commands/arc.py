"""Command: tessellate a great-circle arc between two coordinates."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from frontiermetrix.commands._base import FmxCommand

if TYPE_CHECKING:
    from frontiermetrix.commands._context import AppContext


@click.command(
    cls=FmxCommand,
    context_settings={"ignore_unknown_options": True},
    examples="""\
  frontiermetrix arc 40.71 -74.01 51.51 -0.13
  frontiermetrix arc 0 0 1 1 --segments 24
  frontiermetrix arc 35.68 139.69 -33.87 151.21 --magnitude 1.8
  frontiermetrix --json arc 0 0 0 180 --height-scale 0""",
)
@click.argument("start_lat", type=float)
@click.argument("start_lon", type=float)
@click.argument("end_lat", type=float)
@click.argument("end_lon", type=float)
@click.option(
    "--segments",
    type=click.IntRange(min=1),
    default=None,
    help="Upper bound on segments (default: [arcs] max_segments).",
)
@click.option(
    "--height-scale",
    type=click.FloatRange(min=0),
    default=None,
    help="Arch height as a fraction of the Earth radius.",
)
@click.option(
    "--magnitude",
    type=click.FloatRange(min=0),
    default=None,
    help="Flow magnitude; sets line width, opacity and arch height.",
)
@click.pass_obj
def arc(
    app: AppContext,
    start_lat: float,
    start_lon: float,
    end_lat: float,
    end_lon: float,
    segments: int | None,
    height_scale: float | None,
    magnitude: float | None,
) -> None:
    """Build the arc a flow from START to END is drawn along."""
    from frontiermetrix.domain.models import Coordinate
    from frontiermetrix.services.arcs import describe_arc

    arcs_cfg = app.settings.arcs
    if height_scale is None and magnitude is None:
        height_scale = arcs_cfg.height_scale

    app.emit(
        describe_arc(
            Coordinate(start_lat, start_lon),
            Coordinate(end_lat, end_lon),
            max_segments=segments or arcs_cfg.max_segments,
            height_scale=height_scale,
            magnitude=magnitude,
        )
    )
