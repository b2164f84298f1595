"""Command: headless timeline playback on a virtual clock."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from frontiermetrix.commands._base import TIMESTAMP, FmxCommand

if TYPE_CHECKING:
    from frontiermetrix.commands._context import AppContext
    from frontiermetrix.domain.models import DateWindow


def _progress(instant: datetime, bounds: DateWindow) -> float:
    total = bounds.duration
    if not total:
        return 0.0
    return (instant - bounds.lower) / total


@click.command(
    cls=FmxCommand,
    examples="""\
  frontiermetrix replay
  frontiermetrix replay --ticks 12
  frontiermetrix replay --since 2025-01-20T00:00:00Z --until 2025-01-21T00:00:00Z
  frontiermetrix --json replay --data-dir ./data""",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the seed files (default: [data] data_dir).",
)
@click.option(
    "--ticks",
    type=click.IntRange(min=0),
    default=None,
    help="Stop after this many ticks (default: play to the end).",
)
@click.option("--since", type=TIMESTAMP, default=None, help="Start playback here.")
@click.option("--until", type=TIMESTAMP, default=None, help="End playback here.")
@click.pass_obj
def replay(
    app: AppContext,
    data_dir: Path | None,
    ticks: int | None,
    since: datetime | None,
    until: datetime | None,
) -> None:
    """Play the dataset back one step per tick and report each frame."""
    import asyncio

    from frontiermetrix.domain.models import DateWindow
    from frontiermetrix.infrastructure.scheduling import ManualScheduler
    from frontiermetrix.services._helpers import iso
    from frontiermetrix.services.playback import PlaybackSession
    from frontiermetrix.services.result import ServiceResult

    op = "replay"
    scheduler = ManualScheduler()
    session = PlaybackSession.from_settings(
        app.settings,
        scheduler,
        data_dir=data_dir,
        event_bus=app.event_bus,
    )

    opened = asyncio.run(session.open())
    if not opened.ok:
        session.close()
        app.emit(opened.as_op(op))
        return

    timeline = session.timeline
    pipeline = session.pipeline
    if "bounds" not in opened.data:
        session.close()
        app.emit(
            ServiceResult.failure(
                op,
                "EMPTY_DATASET",
                "No timestamped entities to play",
                warnings=opened.warnings,
            )
        )
        return

    if since is not None or until is not None:
        lower = max(since or timeline.bounds.lower, timeline.bounds.lower)
        upper = min(until or timeline.bounds.upper, timeline.bounds.upper)
        if lower > upper:
            session.close()
            raise click.UsageError("--since/--until do not overlap the dataset")
        session.restrict(DateWindow(lower=lower, upper=upper))

    frames: list[dict[str, Any]] = []

    def record(view: Any) -> None:
        instant = view.filter.date_window.lower
        frames.append(
            {
                "instant": iso(instant),
                "progress": round(_progress(instant, timeline.bounds), 4),
                "signal_count": len(view.signals),
                "flow_count": len(view.flows),
                "ids": [e.id for e in (*view.signals, *view.flows)],
            }
        )

    pipeline.on_filtered_view_changed(record)
    pipeline.flush()

    ticks_run = 0
    session.play()
    while timeline.is_playing and (ticks is None or ticks_run < ticks):
        scheduler.advance(session.ticker.interval)
        ticks_run += 1
    session.pause()
    pipeline.flush()
    session.close()

    app.emit(
        ServiceResult.success(
            op,
            {
                "bounds": {
                    "lower": iso(timeline.bounds.lower),
                    "upper": iso(timeline.bounds.upper),
                },
                "ticks_run": ticks_run,
                "final_instant": iso(timeline.current_instant),
                "frames": frames,
            },
            warnings=opened.warnings,
        )
    )
