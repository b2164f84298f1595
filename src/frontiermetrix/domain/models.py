"""Entity and filter models.

Dataset records map onto :class:`AssetSignal` and :class:`AssetFlow`
through field aliases (``type``, ``ts``, ``fromLat``, ``classTag``...), so
``model_validate(record)`` is the whole decoding step. Entities are frozen
and compare by ``id`` only.

Timestamps accept ISO 8601 with fractional seconds first and fall back to
whole seconds. Anything else raises :class:`InvalidTimestampError`, which
pydantic surfaces as a validation error on the ``ts`` field.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any, Self

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, model_validator

from frontiermetrix.domain.types import AssetClass, RegionPreset, RiskLevel

# Bounds of an "unbounded" window; finite so durations stay computable.
DISTANT_PAST = datetime(1, 1, 1, tzinfo=UTC)
DISTANT_FUTURE = datetime(9999, 12, 31, 23, 59, 59, tzinfo=UTC)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
TIMESTAMP_FALLBACK_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class InvalidTimestampError(ValueError):
    """A timestamp matched neither the primary nor the fallback format."""


def parse_timestamp(raw: str) -> datetime:
    """Parse a dataset timestamp into an aware datetime.

    Examples:
        >>> parse_timestamp("2025-01-20T12:00:00.000Z").isoformat()
        '2025-01-20T12:00:00+00:00'
        >>> parse_timestamp("2025-01-20T12:00:00+02:00").isoformat()
        '2025-01-20T12:00:00+02:00'
    """
    for fmt in (TIMESTAMP_FORMAT, TIMESTAMP_FALLBACK_FORMAT):
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    msg = f"Invalid date format: {raw}"
    raise InvalidTimestampError(msg)


def _coerce_timestamp(value: Any) -> datetime:
    if isinstance(value, str):
        return parse_timestamp(value)
    if isinstance(value, datetime):
        return value
    msg = f"Timestamp must be a string, got {type(value).__name__}"
    raise InvalidTimestampError(msg)


def _require_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        msg = "timestamp must carry a timezone"
        raise InvalidTimestampError(msg)
    return value


Timestamp = Annotated[
    datetime,
    BeforeValidator(_coerce_timestamp),
    AfterValidator(_require_aware),
]


# ---------------------------------------------------------------------------
# Geography
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Coordinate:
    """A point on the globe in degrees."""

    latitude: float
    longitude: float

    def is_finite(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class _Entity(BaseModel):
    """Frozen record with identity-based equality."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(min_length=1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class AssetSignal(_Entity):
    """A located asset observation with a risk level."""

    name: str
    asset_class: AssetClass = Field(alias="type")
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    value: float
    risk: RiskLevel
    country: str
    timestamp: Timestamp = Field(alias="ts")

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


class AssetFlow(_Entity):
    """A directional movement of an asset class between two points."""

    from_lat: float = Field(alias="fromLat", ge=-90, le=90)
    from_lon: float = Field(alias="fromLon", ge=-180, le=180)
    to_lat: float = Field(alias="toLat", ge=-90, le=90)
    to_lon: float = Field(alias="toLon", ge=-180, le=180)
    magnitude: float = Field(ge=0)
    asset_class: AssetClass = Field(alias="classTag")
    timestamp: Timestamp = Field(alias="ts")

    @property
    def origin(self) -> Coordinate:
        return Coordinate(self.from_lat, self.from_lon)

    @property
    def destination(self) -> Coordinate:
        return Coordinate(self.to_lat, self.to_lon)

    @property
    def distance_km(self) -> float:
        """Great-circle distance between origin and destination."""
        from frontiermetrix.domain.arcs import distance_km

        return distance_km(self.origin, self.destination)


# ---------------------------------------------------------------------------
# Windows and filters
# ---------------------------------------------------------------------------


class DateWindow(BaseModel):
    """Inclusive closed range of aware instants."""

    model_config = {"frozen": True}

    lower: Timestamp
    upper: Timestamp

    @model_validator(mode="after")
    def _ordered(self) -> Self:
        if self.lower > self.upper:
            msg = f"window lower bound {self.lower} is after upper bound {self.upper}"
            raise ValueError(msg)
        return self

    @classmethod
    def unbounded(cls) -> DateWindow:
        return cls(lower=DISTANT_PAST, upper=DISTANT_FUTURE)

    @classmethod
    def point(cls, instant: datetime) -> DateWindow:
        """Zero-width window admitting exactly *instant*."""
        return cls(lower=instant, upper=instant)

    @property
    def duration(self) -> timedelta:
        return self.upper - self.lower

    def contains(self, instant: datetime) -> bool:
        return self.lower <= instant <= self.upper


class FilterConfig(BaseModel):
    """User-selected filter state. Replaced wholesale, never mutated."""

    model_config = {"frozen": True}

    asset_classes: frozenset[AssetClass] = Field(default_factory=lambda: frozenset(AssetClass))
    region: RegionPreset = RegionPreset.GLOBAL
    risk_min: RiskLevel = RiskLevel.LOW
    date_window: DateWindow = Field(default_factory=DateWindow.unbounded)
    show_flows: bool = True

    def with_instant(self, instant: datetime) -> FilterConfig:
        """Copy of this filter narrowed to the single instant *instant*."""
        return self.model_copy(update={"date_window": DateWindow.point(instant)})


class TimelineState(BaseModel):
    """Snapshot of playback state."""

    model_config = {"frozen": True}

    current_instant: Timestamp
    is_playing: bool
    bounds: DateWindow
