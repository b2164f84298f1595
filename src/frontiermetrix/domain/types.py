"""Classification enums: asset classes, risk levels, and region presets.

RiskLevel is ordered by severity (low < medium < high < extreme). Its
comparison operators use that order, never the underlying string value.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class AssetClass(StrEnum):
    """Asset classes a signal or flow can belong to."""

    CURRENCY = "currency"
    CRYPTO = "crypto"
    BOND = "bond"
    COMMODITY = "commodity"
    STABLECOIN = "stablecoin"

    @property
    def display_name(self) -> str:
        return _ASSET_CLASS_NAMES[self]


_ASSET_CLASS_NAMES: dict[AssetClass, str] = {
    AssetClass.CURRENCY: "Currency",
    AssetClass.CRYPTO: "Cryptocurrency",
    AssetClass.BOND: "Bond",
    AssetClass.COMMODITY: "Commodity",
    AssetClass.STABLECOIN: "Stablecoin",
}


class RiskLevel(StrEnum):
    """Severity of a signal, ordered from LOW to EXTREME."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        """Position in the severity order (LOW is 0)."""
        return _RISK_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_ORDER: list[RiskLevel] = list(RiskLevel)


class RegionPreset(StrEnum):
    """Camera framing presets. Never used for entity filtering."""

    GLOBAL = "global"
    AFRICA = "africa"
    LATAM = "latam"
    APAC = "apac"
    EMEA = "emea"
    MENA = "mena"
    EUROPE = "europe"
    NORTH_AMERICA = "northAmerica"

    @property
    def display_name(self) -> str:
        return _REGION_FRAMES[self][0]

    @property
    def center(self) -> tuple[float, float]:
        """``(latitude, longitude)`` the camera centers on."""
        return _REGION_FRAMES[self][1]

    @property
    def center_distance(self) -> float:
        """Camera distance from the center, in metres."""
        return _REGION_FRAMES[self][2]


_REGION_FRAMES: dict[RegionPreset, tuple[str, tuple[float, float], float]] = {
    RegionPreset.GLOBAL: ("Global", (0.0, 0.0), 25_000_000),
    RegionPreset.AFRICA: ("Africa", (4.0, 20.0), 4_200_000),
    RegionPreset.LATAM: ("Latin America", (-15.0, -60.0), 5_000_000),
    RegionPreset.APAC: ("Asia Pacific", (10.0, 115.0), 6_000_000),
    RegionPreset.EMEA: ("EMEA", (35.0, 20.0), 5_200_000),
    RegionPreset.MENA: ("MENA", (24.0, 44.0), 3_800_000),
    RegionPreset.EUROPE: ("Europe", (54.0, 15.0), 2_800_000),
    RegionPreset.NORTH_AMERICA: ("North America", (39.0, -98.0), 3_800_000),
}
