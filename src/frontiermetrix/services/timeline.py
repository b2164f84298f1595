"""TimelineController — playback state machine over a bounded instant.

States: paused <-> playing. ``tick()`` is driven by an external fixed
cadence (see :class:`~frontiermetrix.infrastructure.scheduling.Ticker`)
and advances one step while playing. A step that would leave the bounds
is rejected, never clamped: ``tick()`` pauses, ``step()`` does nothing.

The wall clock and the haptic feedback device are injected, so the state
machine runs the same under tests as in an application.

INVARIANT: ``current_instant`` always lies within ``bounds``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from frontiermetrix.domain.models import DateWindow, TimelineState
from frontiermetrix.services._helpers import iso, utc_now
from frontiermetrix.services.base import BaseService

if TYPE_CHECKING:
    from frontiermetrix.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)

DEFAULT_STEP = timedelta(hours=1)
DEFAULT_TICK_INTERVAL_SECONDS = 0.25

Clock = Callable[[], datetime]
InstantCallback = Callable[[datetime], None]


class FeedbackSink(Protocol):
    """Tactile feedback device (a light impact per committed step)."""

    def impact(self) -> None: ...


def _shift(instant: datetime, delta: timedelta) -> datetime | None:
    try:
        return instant + delta
    except OverflowError:
        return None


class TimelineController(BaseService):
    """Owns playback state: playing flag, current instant, and bounds."""

    def __init__(
        self,
        *,
        clock: Clock = utc_now,
        feedback: FeedbackSink | None = None,
        step: timedelta = DEFAULT_STEP,
        bounds: DateWindow | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        super().__init__(event_bus)
        self._feedback = feedback
        self._step = step
        self._bounds = bounds or DateWindow.unbounded()
        now = clock()
        self._instant = now if self._bounds.contains(now) else self._bounds.lower
        self._playing = False
        self._haptics_enabled = True
        self._callbacks: list[InstantCallback] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_instant(self) -> datetime:
        return self._instant

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def bounds(self) -> DateWindow:
        return self._bounds

    @property
    def step_size(self) -> timedelta:
        return self._step

    @property
    def haptics_enabled(self) -> bool:
        return self._haptics_enabled

    @property
    def state(self) -> TimelineState:
        return TimelineState(
            current_instant=self._instant,
            is_playing=self._playing,
            bounds=self._bounds,
        )

    def progress(self) -> float:
        """Position of the current instant within the bounds, 0.0 to 1.0."""
        total = self._bounds.duration
        if total <= timedelta(0):
            return 0.0
        return (self._instant - self._bounds.lower) / total

    def on_instant_changed(self, callback: InstantCallback) -> Callable[[], None]:
        """Call *callback* with every committed instant. Returns an unsubscribe function."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def play(self) -> None:
        if not self._playing:
            self._playing = True
            self._dispatch_event("post_timeline_state", {"is_playing": True})

    def pause(self) -> None:
        if self._playing:
            self._playing = False
            self._dispatch_event("post_timeline_state", {"is_playing": False})

    def tick(self) -> bool:
        """Advance one step while playing. Returns True if the instant moved.

        Reaching past the upper bound pauses playback and keeps the last
        valid instant.
        """
        if not self._playing:
            return False
        candidate = _shift(self._instant, self._step)
        if candidate is None or not self._bounds.contains(candidate):
            logger.debug("Timeline reached %s; pausing", iso(self._instant))
            self.pause()
            return False
        return self._commit(candidate, feedback=True)

    def step(self, interval: timedelta) -> bool:
        """Manual scrub by *interval*. Returns True if the instant moved.

        Out-of-bounds targets are ignored, and so is a zero interval.
        """
        candidate = _shift(self._instant, interval)
        if candidate is None or not self._bounds.contains(candidate):
            return False
        return self._commit(candidate, feedback=True)

    def set_bounds(self, bounds: DateWindow) -> None:
        """Replace the bounds, snapping to the new lower bound if needed."""
        inside = bounds.contains(self._instant)
        self._bounds = bounds
        if not inside:
            self._commit(bounds.lower)

    def reset_to_start(self) -> None:
        self._commit(self._bounds.lower)

    def reset_to_end(self) -> None:
        self._commit(self._bounds.upper)

    def set_progress(self, progress: float) -> None:
        """Jump to the instant at *progress* (clamped to 0.0-1.0) of the bounds."""
        clamped = max(0.0, min(1.0, progress))
        target = self._bounds.lower + self._bounds.duration * clamped
        self._commit(min(target, self._bounds.upper))

    def set_haptics_enabled(self, enabled: bool) -> None:
        self._haptics_enabled = enabled

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _commit(self, instant: datetime, *, feedback: bool = False) -> bool:
        if instant == self._instant:
            return False
        self._instant = instant
        if feedback and self._haptics_enabled and self._feedback is not None:
            self._feedback.impact()
        for callback in list(self._callbacks):
            try:
                callback(instant)
            except Exception:
                logger.warning("Timeline subscriber failed", exc_info=True)
        self._dispatch_event(
            "post_timeline_step",
            {"instant": iso(instant), "progress": self.progress()},
        )
        return True
