"""SignalPipeline — the debounced, filtered view over a loaded dataset.

Commands: ``load``, ``refresh``, ``apply_filter``, ``set_instant``.
Observation: ``current_filtered_view`` and ``on_filtered_view_changed``.

Filter and instant changes do not recompute immediately. Each change
cancels the pending timer and arms a new one, so a burst of changes inside
the debounce window collapses into exactly one recompute that reads the
latest filter. Loads recompute immediately.

INVARIANT: A failed load leaves the entities and the published view as
they were.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from frontiermetrix.domain.arcs import line_opacity, line_width
from frontiermetrix.domain.filters import filter_flows, filter_signals
from frontiermetrix.domain.models import AssetFlow, AssetSignal, FilterConfig
from frontiermetrix.infrastructure.dataset import Dataset, DatasetError, dump_records
from frontiermetrix.services._helpers import iso
from frontiermetrix.services.base import BaseService
from frontiermetrix.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from frontiermetrix.infrastructure.scheduling import Scheduler, TimerHandle
    from frontiermetrix.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.12


class DatasetSource(Protocol):
    """Anything that can load a dataset asynchronously (e.g. DatasetLoader)."""

    async def load(self) -> Dataset: ...


@dataclass(frozen=True)
class FilteredView:
    """One published result of filtering the dataset.

    ``generation`` increases by one on every recompute.
    """

    signals: tuple[AssetSignal, ...] = ()
    flows: tuple[AssetFlow, ...] = ()
    filter: FilterConfig = field(default_factory=FilterConfig)
    generation: int = 0


FilteredViewCallback = Callable[[FilteredView], None]
LoadErrorCallback = Callable[[ServiceError], None]


class SignalPipeline(BaseService):
    """Owns the full dataset, the current filter, and the filtered view."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        initial_filter: FilterConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        super().__init__(event_bus)
        self._scheduler = scheduler
        self._debounce = debounce
        self._filter = initial_filter or FilterConfig()
        self._signals: tuple[AssetSignal, ...] = ()
        self._flows: tuple[AssetFlow, ...] = ()
        self._view = FilteredView(filter=self._filter)
        self._pending: TimerHandle | None = None
        self._recompute_count = 0
        self._last_error: ServiceError | None = None
        self._view_callbacks: list[FilteredViewCallback] = []
        self._error_callbacks: list[LoadErrorCallback] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def all_signals(self) -> tuple[AssetSignal, ...]:
        return self._signals

    @property
    def all_flows(self) -> tuple[AssetFlow, ...]:
        return self._flows

    @property
    def current_filter(self) -> FilterConfig:
        """The latest requested filter (possibly not yet applied)."""
        return self._filter

    @property
    def filtered_signals(self) -> tuple[AssetSignal, ...]:
        return self._view.signals

    @property
    def filtered_flows(self) -> tuple[AssetFlow, ...]:
        return self._view.flows

    @property
    def debounce(self) -> float:
        return self._debounce

    @property
    def recompute_count(self) -> int:
        return self._recompute_count

    @property
    def has_pending_recompute(self) -> bool:
        return self._pending is not None

    @property
    def last_error(self) -> ServiceError | None:
        """Error of the most recent failed load, cleared by a successful one."""
        return self._last_error

    def current_filtered_view(self) -> FilteredView:
        return self._view

    def snapshot(self) -> ServiceResult:
        """The current filtered view as records, for output and export."""
        view = self._view
        config = view.filter
        flows = []
        for flow, record in zip(view.flows, dump_records(view.flows), strict=True):
            record["distance_km"] = round(flow.distance_km, 1)
            record["width"] = line_width(flow.magnitude)
            record["opacity"] = line_opacity(flow.magnitude)
            flows.append(record)
        return ServiceResult.success(
            "filtered_view",
            {
                "filter": {
                    "asset_classes": sorted(str(c) for c in config.asset_classes),
                    "region": str(config.region),
                    "risk_min": str(config.risk_min),
                    "date_window": {
                        "lower": iso(config.date_window.lower),
                        "upper": iso(config.date_window.upper),
                    },
                    "show_flows": config.show_flows,
                },
                "generation": view.generation,
                "signal_count": len(view.signals),
                "flow_count": len(view.flows),
                "total_signals": len(self._signals),
                "total_flows": len(self._flows),
                "signals": dump_records(view.signals),
                "flows": flows,
            },
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def on_filtered_view_changed(self, callback: FilteredViewCallback) -> Callable[[], None]:
        """Call *callback* after every recompute. Returns an unsubscribe function."""
        self._view_callbacks.append(callback)
        return lambda: self._remove(self._view_callbacks, callback)

    def on_load_error(self, callback: LoadErrorCallback) -> Callable[[], None]:
        """Call *callback* when a load attempt fails. Returns an unsubscribe function."""
        self._error_callbacks.append(callback)
        return lambda: self._remove(self._error_callbacks, callback)

    @staticmethod
    def _remove(callbacks: list[Callable[..., None]], callback: Callable[..., None]) -> None:
        if callback in callbacks:
            callbacks.remove(callback)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def load(
        self,
        signals: Sequence[AssetSignal],
        flows: Sequence[AssetFlow],
        *,
        warnings: Sequence[str] = (),
    ) -> ServiceResult:
        """Replace the dataset wholesale and recompute without debounce."""
        op = "load"
        result_warnings = list(warnings)

        self._signals = tuple(signals)
        self._flows = tuple(flows)
        self._last_error = None
        self._cancel_pending()
        self._recompute()

        self._dispatch_event(
            "post_load",
            {
                "signal_count": len(self._signals),
                "flow_count": len(self._flows),
                "dropped": len(warnings),
            },
            result_warnings,
        )
        return ServiceResult.success(
            op,
            {
                "signal_count": len(self._signals),
                "flow_count": len(self._flows),
                "visible_signals": len(self._view.signals),
                "visible_flows": len(self._view.flows),
                "dropped": len(warnings),
            },
            warnings=result_warnings,
        )

    async def refresh(self, source: DatasetSource) -> ServiceResult:
        """Load from *source*, keeping the current data if the load fails."""
        op = "refresh"
        try:
            dataset = await source.load()
        except DatasetError as exc:
            error = ServiceError(
                code=exc.code,
                message=exc.message,
                detail={"path": str(exc.path)} if exc.path else {},
            )
            warnings: list[str] = []
            self._fail_load(error, warnings)
            return ServiceResult(ok=False, op=op, error=error, warnings=warnings)

        result = self.load(dataset.signals, dataset.flows, warnings=dataset.warnings)
        return result.as_op(op)

    def apply_filter(self, config: FilterConfig) -> None:
        """Replace the filter and schedule a debounced recompute."""
        self._filter = config
        self._schedule_recompute()

    def set_instant(self, instant: datetime) -> None:
        """Show only entities timestamped exactly at *instant* (debounced)."""
        if instant.tzinfo is None:
            msg = "instant must be timezone-aware"
            raise ValueError(msg)
        self._filter = self._filter.with_instant(instant)
        self._schedule_recompute()

    def flush(self) -> bool:
        """Run a pending recompute now. Returns False if none was pending."""
        if self._pending is None:
            return False
        self._cancel_pending()
        self._recompute()
        return True

    def close(self) -> None:
        """Drop any pending recompute."""
        self._cancel_pending()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _schedule_recompute(self) -> None:
        self._cancel_pending()
        self._pending = self._scheduler.call_later(self._debounce, self._on_debounce_elapsed)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _on_debounce_elapsed(self) -> None:
        self._pending = None
        self._recompute()

    def _recompute(self) -> None:
        config = self._filter
        self._recompute_count += 1
        self._view = FilteredView(
            signals=filter_signals(self._signals, config),
            flows=filter_flows(self._flows, config),
            filter=config,
            generation=self._recompute_count,
        )
        logger.debug(
            "Filtered view %d: %d/%d signals, %d/%d flows",
            self._view.generation,
            len(self._view.signals),
            len(self._signals),
            len(self._view.flows),
            len(self._flows),
        )
        self._publish(self._view)

    def _publish(self, view: FilteredView) -> None:
        for callback in list(self._view_callbacks):
            try:
                callback(view)
            except Exception:
                logger.warning("Filtered view subscriber failed", exc_info=True)
        self._dispatch_event(
            "post_filter_view",
            {
                "signal_count": len(view.signals),
                "flow_count": len(view.flows),
                "generation": view.generation,
            },
        )

    def _fail_load(self, error: ServiceError, warnings: list[str]) -> None:
        logger.warning("Dataset load failed: %s", error.message)
        self._last_error = error
        for callback in list(self._error_callbacks):
            try:
                callback(error)
            except Exception:
                logger.warning("Load error subscriber failed", exc_info=True)
        self._dispatch_event(
            "post_load_error",
            {"code": error.code, "message": error.message},
            warnings,
        )
