"""PlaybackSession — the pipeline and the timeline wired together.

A session owns one :class:`SignalPipeline`, one :class:`TimelineController`
and the :class:`Ticker` that drives it. Every committed timeline instant is
forwarded to ``pipeline.set_instant``, so the filtered view follows playback
through the usual debounce.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from frontiermetrix.domain.filters import dataset_bounds
from frontiermetrix.domain.models import DateWindow, FilterConfig
from frontiermetrix.infrastructure.dataset import DatasetLoader
from frontiermetrix.infrastructure.scheduling import Ticker
from frontiermetrix.services._helpers import iso, utc_now
from frontiermetrix.services.pipeline import DEFAULT_DEBOUNCE_SECONDS, DatasetSource, SignalPipeline
from frontiermetrix.services.result import ServiceResult
from frontiermetrix.services.timeline import (
    DEFAULT_STEP,
    DEFAULT_TICK_INTERVAL_SECONDS,
    Clock,
    FeedbackSink,
    TimelineController,
)

if TYPE_CHECKING:
    from pathlib import Path

    from frontiermetrix.config.settings import FrontierSettings
    from frontiermetrix.infrastructure.scheduling import Scheduler
    from frontiermetrix.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class PlaybackSession:
    """Load a dataset, bound the timeline to it, and play it back."""

    def __init__(
        self,
        source: DatasetSource,
        scheduler: Scheduler,
        *,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        step: timedelta = DEFAULT_STEP,
        tick_interval: float = DEFAULT_TICK_INTERVAL_SECONDS,
        clock: Clock = utc_now,
        feedback: FeedbackSink | None = None,
        initial_filter: FilterConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._source = source
        self.pipeline = SignalPipeline(
            scheduler,
            debounce=debounce,
            initial_filter=initial_filter,
            event_bus=event_bus,
        )
        self.timeline = TimelineController(
            clock=clock,
            feedback=feedback,
            step=step,
            event_bus=event_bus,
        )
        self.ticker = Ticker(scheduler, tick_interval, self._on_tick)
        self._unsubscribe = self.timeline.on_instant_changed(self.pipeline.set_instant)

    @classmethod
    def from_settings(
        cls,
        settings: FrontierSettings,
        scheduler: Scheduler,
        *,
        data_dir: Path | None = None,
        clock: Clock = utc_now,
        feedback: FeedbackSink | None = None,
        event_bus: EventBus | None = None,
    ) -> PlaybackSession:
        """Build a session from ``[data]``, ``[pipeline]`` and ``[timeline]``."""
        loader = DatasetLoader(
            data_dir or settings.data_dir,
            signals_file=settings.data.signals_file,
            flows_file=settings.data.flows_file,
        )
        session = cls(
            loader,
            scheduler,
            debounce=settings.pipeline.debounce_seconds,
            step=settings.timeline.step,
            tick_interval=settings.timeline.tick_interval_seconds,
            clock=clock,
            feedback=feedback,
            event_bus=event_bus,
        )
        session.timeline.set_haptics_enabled(settings.timeline.haptics_enabled)
        return session

    async def open(self) -> ServiceResult:
        """Load the dataset and park the timeline at its earliest timestamp.

        On failure the pipeline keeps its previous data and the timeline is
        left untouched.
        """
        result = await self.pipeline.refresh(self._source)
        if not result.ok:
            return result

        bounds = dataset_bounds(self.pipeline.all_signals, self.pipeline.all_flows)
        if bounds is None:
            logger.debug("Dataset has no timestamps; timeline left unbounded")
            return result

        self.restrict(bounds)
        data = {
            **result.data,
            "bounds": {"lower": iso(bounds.lower), "upper": iso(bounds.upper)},
        }
        return result.model_copy(update={"data": data})

    def restrict(self, bounds: DateWindow) -> None:
        """Bound the timeline to *bounds* and rewind to its start."""
        self.timeline.set_bounds(bounds)
        self.timeline.reset_to_start()
        # set_bounds may already sit on the lower bound, which commits nothing.
        self.pipeline.set_instant(self.timeline.current_instant)

    def play(self) -> None:
        self.timeline.play()
        self.ticker.start()

    def pause(self) -> None:
        self.timeline.pause()
        self.ticker.stop()

    def close(self) -> None:
        """Stop playback and drop pending work. The session is unusable afterwards."""
        self.pause()
        self.pipeline.close()
        self._unsubscribe()

    def _on_tick(self) -> None:
        self.timeline.tick()
        if not self.timeline.is_playing:
            self.ticker.stop()
