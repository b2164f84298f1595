"""Risk styling lookup.

Maps a :class:`RiskLevel` to marker parameters. Colors are Rich color
names so the CLI theme can use them directly; renderers on other surfaces
translate them to their own palette.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from frontiermetrix.domain.types import RiskLevel

if TYPE_CHECKING:
    from frontiermetrix.domain.models import AssetSignal


@dataclass(frozen=True)
class RiskStyle:
    """Marker appearance for one risk level."""

    color: str
    accessible_color: str
    pulse_rate: float
    halo_width: float
    dot_size: float


RISK_STYLES: dict[RiskLevel, RiskStyle] = {
    RiskLevel.LOW: RiskStyle("green", "blue", 1.2, 4, 8),
    RiskLevel.MEDIUM: RiskStyle("yellow", "cyan", 0.9, 6, 10),
    RiskLevel.HIGH: RiskStyle("dark_orange", "purple", 0.6, 8, 12),
    RiskLevel.EXTREME: RiskStyle("red", "hot_pink", 0.45, 10, 14),
}


def risk_style(level: RiskLevel) -> RiskStyle:
    return RISK_STYLES[level]


def risk_color(level: RiskLevel, *, color_vision_friendly: bool = False) -> str:
    style = RISK_STYLES[level]
    return style.accessible_color if color_vision_friendly else style.color


def animation_duration(level: RiskLevel) -> float:
    """Seconds per pulse; higher risk pulses faster."""
    return 1.0 / RISK_STYLES[level].pulse_rate


def accessibility_label(signal: AssetSignal) -> str:
    """Spoken description of a signal marker.

    Examples:
        ``"Bitcoin, Cryptocurrency, risk High"``
    """
    return f"{signal.name}, {signal.asset_class.display_name}, risk {signal.risk.display_name}"
