"""Synchronous event dispatch via pluggy.

Events run on the caller's thread so that plugins observe the same order
of pipeline and timeline changes as the core.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frontiermetrix.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailedEvent:
    """A hook call that raised."""

    hook_name: str
    payload: dict[str, Any]
    error: str


class EventBus:
    """Dispatch lifecycle events to registered plugins.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        max_failures: How many failed events to retain for inspection.
    """

    def __init__(self, plugin_manager: PluginManager, *, max_failures: int = 100) -> None:
        self._pm = plugin_manager
        self._max_failures = max_failures
        self._failures: list[FailedEvent] = []
        self._dispatched = 0

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    @property
    def dispatched(self) -> int:
        """Number of events dispatched, failed or not."""
        return self._dispatched

    @property
    def failures(self) -> list[FailedEvent]:
        return list(self._failures)

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> bool:
        """Call every implementation of *hook_name*. Returns False if one raised."""
        self._dispatched += 1
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook spec named %s; event skipped", hook_name)
            return True

        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", hook_name, exc)
            self._failures.append(FailedEvent(hook_name, payload, str(exc)))
            del self._failures[: -self._max_failures]
            return False
        return True
