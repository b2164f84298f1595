"""Tests for signal and flow visibility predicates."""

from datetime import UTC, datetime, timedelta

from frontiermetrix.domain.filters import (
    dataset_bounds,
    filter_flows,
    filter_signals,
    matches_flow,
    matches_signal,
)
from frontiermetrix.domain.models import AssetFlow, AssetSignal, DateWindow, FilterConfig
from frontiermetrix.domain.types import AssetClass, RegionPreset, RiskLevel

NOON = datetime(2025, 1, 20, 12, tzinfo=UTC)


def _ids(entities: tuple) -> list[str]:
    return [e.id for e in entities]


class TestMatchesSignal:
    def test_default_filter_shows_everything(self, signals: list[AssetSignal]) -> None:
        assert all(matches_signal(s, FilterConfig()) for s in signals)

    def test_class_selection(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig(asset_classes=frozenset({AssetClass.CRYPTO, AssetClass.BOND}))
        assert _ids(filter_signals(signals, config)) == ["sig-btc", "sig-ust"]

    def test_risk_minimum_is_inclusive(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig(risk_min=RiskLevel.HIGH)
        assert _ids(filter_signals(signals, config)) == ["sig-btc", "sig-usdt"]

    def test_extreme_only(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig(risk_min=RiskLevel.EXTREME)
        assert _ids(filter_signals(signals, config)) == ["sig-usdt"]

    def test_date_window(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig(
            date_window=DateWindow(lower=NOON, upper=NOON + timedelta(hours=1))
        )
        assert _ids(filter_signals(signals, config)) == ["sig-btc", "sig-ust", "sig-eur"]

    def test_point_window(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig().with_instant(NOON)
        assert _ids(filter_signals(signals, config)) == ["sig-btc", "sig-eur"]

    def test_region_never_hides(self, signals: list[AssetSignal]) -> None:
        for region in RegionPreset:
            config = FilterConfig(region=region)
            assert len(filter_signals(signals, config)) == len(signals)

    def test_empty_class_set_hides_all(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig(asset_classes=frozenset())
        assert filter_signals(signals, config) == ()

    def test_idempotent(self, signals: list[AssetSignal]) -> None:
        config = FilterConfig(risk_min=RiskLevel.MEDIUM)
        once = filter_signals(signals, config)
        assert filter_signals(once, config) == once


class TestMatchesFlow:
    def test_default_filter_shows_flows(self, flows: list[AssetFlow]) -> None:
        assert all(matches_flow(f, FilterConfig()) for f in flows)

    def test_show_flows_off(self, flows: list[AssetFlow]) -> None:
        config = FilterConfig(show_flows=False)
        assert filter_flows(flows, config) == ()

    def test_risk_does_not_apply_to_flows(self, flows: list[AssetFlow]) -> None:
        config = FilterConfig(risk_min=RiskLevel.EXTREME)
        assert len(filter_flows(flows, config)) == 2

    def test_class_and_window(self, flows: list[AssetFlow]) -> None:
        config = FilterConfig(
            asset_classes=frozenset({AssetClass.CRYPTO, AssetClass.BOND}),
            date_window=DateWindow.point(NOON + timedelta(hours=2)),
        )
        assert _ids(filter_flows(flows, config)) == ["flow-tyo-syd"]


class TestCryptoBondScenario:
    def test_crypto_and_bond_at_or_above_medium(
        self, signals: list[AssetSignal], flows: list[AssetFlow]
    ) -> None:
        config = FilterConfig(
            asset_classes=frozenset({AssetClass.CRYPTO, AssetClass.BOND}),
            risk_min=RiskLevel.MEDIUM,
        )
        assert _ids(filter_signals(signals, config)) == ["sig-btc"]
        assert _ids(filter_flows(flows, config)) == ["flow-ny-ldn", "flow-tyo-syd"]


class TestDatasetBounds:
    def test_spans_signals_and_flows(
        self, signals: list[AssetSignal], flows: list[AssetFlow]
    ) -> None:
        bounds = dataset_bounds(signals, flows)
        assert bounds == DateWindow(lower=NOON, upper=NOON + timedelta(hours=3))

    def test_empty(self) -> None:
        assert dataset_bounds([], []) is None
