"""Command: load a dataset and print the filtered view."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import click

from frontiermetrix.commands._base import TIMESTAMP, FmxCommand
from frontiermetrix.domain.types import AssetClass, RiskLevel

if TYPE_CHECKING:
    from frontiermetrix.commands._context import AppContext


@click.command(
    cls=FmxCommand,
    examples="""\
  frontiermetrix view
  frontiermetrix view --data-dir ./data --class crypto --class bond
  frontiermetrix view --risk-min high --no-flows
  frontiermetrix view --since 2025-01-01 --until 2025-01-31T23:59:59Z
  frontiermetrix view --at 2025-01-20T12:00:00.000Z
  frontiermetrix -q view --class stablecoin""",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the seed files (default: [data] data_dir).",
)
@click.option(
    "--class",
    "classes",
    multiple=True,
    type=click.Choice([c.value for c in AssetClass]),
    help="Asset class to show (repeatable; default: all).",
)
@click.option(
    "--risk-min",
    type=click.Choice([r.value for r in RiskLevel]),
    default=RiskLevel.LOW.value,
    show_default=True,
    help="Hide signals below this risk level.",
)
@click.option("--since", type=TIMESTAMP, default=None, help="Window start (inclusive).")
@click.option("--until", type=TIMESTAMP, default=None, help="Window end (inclusive).")
@click.option("--at", "at", type=TIMESTAMP, default=None, help="Show one exact instant.")
@click.option("--no-flows", is_flag=True, help="Hide all flows.")
@click.pass_obj
def view(
    app: AppContext,
    data_dir: Path | None,
    classes: tuple[str, ...],
    risk_min: str,
    since: datetime | None,
    until: datetime | None,
    at: datetime | None,
    no_flows: bool,
) -> None:
    """Show the signals and flows that pass a filter."""
    import asyncio

    from frontiermetrix.domain.models import DISTANT_FUTURE, DISTANT_PAST, DateWindow, FilterConfig
    from frontiermetrix.infrastructure.dataset import DatasetLoader
    from frontiermetrix.infrastructure.scheduling import ManualScheduler
    from frontiermetrix.services.pipeline import SignalPipeline

    if at is not None and (since is not None or until is not None):
        raise click.UsageError("--at cannot be combined with --since/--until")
    lower = since or DISTANT_PAST
    upper = until or DISTANT_FUTURE
    if lower > upper:
        raise click.UsageError("--since must not be after --until")

    config = FilterConfig(
        asset_classes=frozenset(AssetClass(c) for c in classes) or frozenset(AssetClass),
        risk_min=RiskLevel(risk_min),
        date_window=DateWindow(lower=lower, upper=upper),
        show_flows=not no_flows,
    )

    settings = app.settings
    loader = DatasetLoader(
        data_dir or settings.data_dir,
        signals_file=settings.data.signals_file,
        flows_file=settings.data.flows_file,
    )
    pipeline = SignalPipeline(
        ManualScheduler(),
        debounce=settings.pipeline.debounce_seconds,
        initial_filter=config,
        event_bus=app.event_bus,
    )

    loaded = asyncio.run(pipeline.refresh(loader))
    if not loaded.ok:
        app.emit(loaded)
        return

    if at is not None:
        pipeline.set_instant(at)
        pipeline.flush()

    result = pipeline.snapshot()
    app.emit(result.model_copy(update={"warnings": loaded.warnings}))
