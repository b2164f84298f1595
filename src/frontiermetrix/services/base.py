"""BaseService — shared foundation for the pipeline and the timeline.

Services optionally receive an :class:`EventBus`. Lifecycle events are
dispatched through it; without one, dispatch is a no-op.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frontiermetrix.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class SignalPipeline(BaseService):
            def load(self, signals, flows) -> ServiceResult:
                ...
                self._dispatch_event("post_load", {...}, warnings)
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._event_bus = event_bus

    @property
    def event_bus(self) -> EventBus | None:
        return self._event_bus

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str] | None = None,
    ) -> None:
        """Dispatch a lifecycle event. No-op if no event bus is attached.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._event_bus
        if bus is None:
            return
        try:
            ok = bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            ok = False
        if not ok and warnings is not None:
            warnings.append(f"Event dispatch failed for {hook_name}")
