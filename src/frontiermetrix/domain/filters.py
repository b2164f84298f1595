"""Visibility predicates for signals and flows.

Pure functions over :class:`FilterConfig`. Region is deliberately absent:
it frames the camera and never hides an entity.
"""

from __future__ import annotations

from collections.abc import Iterable

from frontiermetrix.domain.models import AssetFlow, AssetSignal, DateWindow, FilterConfig


def matches_signal(signal: AssetSignal, config: FilterConfig) -> bool:
    """Class selected, risk at or above the minimum, timestamp in the window."""
    return (
        signal.asset_class in config.asset_classes
        and signal.risk >= config.risk_min
        and config.date_window.contains(signal.timestamp)
    )


def matches_flow(flow: AssetFlow, config: FilterConfig) -> bool:
    """Flows shown, class selected, timestamp in the window."""
    return (
        config.show_flows
        and flow.asset_class in config.asset_classes
        and config.date_window.contains(flow.timestamp)
    )


def filter_signals(signals: Iterable[AssetSignal], config: FilterConfig) -> tuple[AssetSignal, ...]:
    return tuple(s for s in signals if matches_signal(s, config))


def filter_flows(flows: Iterable[AssetFlow], config: FilterConfig) -> tuple[AssetFlow, ...]:
    return tuple(f for f in flows if matches_flow(f, config))


def dataset_bounds(
    signals: Iterable[AssetSignal],
    flows: Iterable[AssetFlow],
) -> DateWindow | None:
    """Window spanning every entity timestamp, or None when there are none."""
    stamps = [s.timestamp for s in signals] + [f.timestamp for f in flows]
    if not stamps:
        return None
    return DateWindow(lower=min(stamps), upper=max(stamps))
