"""Great-circle arc tessellation for flow rendering.

``build_arc`` turns two coordinates into an ordered path along the great
circle between them. Resolution adapts to distance: one segment per 500 km,
clamped to [24, 96], and never above the caller's ``max_segments``.

Each interpolated point is pushed outward by ``1 + height_scale * sin(t*pi)``
before it is projected back to latitude/longitude, so the arch peaks at the
midpoint and touches the sphere at both endpoints. The projection is
radial, which leaves latitude/longitude unchanged; 3D renderers read the
same factor from :func:`arch_factor` to lift the path.

Degenerate input never raises:

- Nearly coincident points (``d <= 0.001`` rad) interpolate latitude and
  longitude linearly, since slerp is unstable there.
- Antipodal points (``pi - d < 1e-6``) have no unique great circle. The
  path follows the circle through ``start`` and the north pole (the prime
  meridian direction when ``start`` is itself a pole).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from frontiermetrix.domain.models import Coordinate

if TYPE_CHECKING:
    from frontiermetrix.domain.models import AssetFlow

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_MAX_SEGMENTS = 64
DEFAULT_HEIGHT_SCALE = 0.12

MIN_ADAPTIVE_SEGMENTS = 24
MAX_ADAPTIVE_SEGMENTS = 96
KM_PER_SEGMENT = 500.0

COINCIDENT_THRESHOLD_RAD = 0.001
ANTIPODAL_THRESHOLD_RAD = 1e-6

_Vector = tuple[float, float, float]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _wrap_longitude(degrees: float) -> float:
    """Normalize a longitude (or longitude delta) into [-180, 180)."""
    return (degrees + 180.0) % 360.0 - 180.0


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------


def haversine_radians(start: Coordinate, end: Coordinate) -> float:
    """Angular distance between two coordinates on the unit sphere."""
    lat1 = math.radians(start.latitude)
    lon1 = math.radians(start.longitude)
    lat2 = math.radians(end.latitude)
    lon2 = math.radians(end.longitude)

    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Rounding can push antipodal pairs just past 1.0.
    a = _clamp(a, 0.0, 1.0)
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km(start: Coordinate, end: Coordinate) -> float:
    """Surface distance in kilometres on a sphere of Earth's mean radius."""
    return haversine_radians(start, end) * EARTH_RADIUS_METERS / 1000


def segment_count(
    start: Coordinate,
    end: Coordinate,
    max_segments: int = DEFAULT_MAX_SEGMENTS,
) -> int:
    """Number of segments ``build_arc`` uses for this pair.

    Examples:
        >>> segment_count(Coordinate(0, 0), Coordinate(0, 1))
        24
        >>> segment_count(Coordinate(0, 0), Coordinate(0, 180), max_segments=200)
        40
    """
    adaptive = int(distance_km(start, end) / KM_PER_SEGMENT)
    adaptive = max(MIN_ADAPTIVE_SEGMENTS, min(MAX_ADAPTIVE_SEGMENTS, adaptive))
    return max(1, min(max_segments, adaptive))


# ---------------------------------------------------------------------------
# Rendering hints
# ---------------------------------------------------------------------------


def line_width(magnitude: float) -> float:
    """Polyline width in points, 1.0 to 5.0."""
    return _clamp(magnitude * 2.0, 1.0, 5.0)


def line_opacity(magnitude: float) -> float:
    """Polyline alpha, 0.3 to 1.0."""
    return _clamp(magnitude * 0.5, 0.3, 1.0)


def height_scale_for(magnitude: float) -> float:
    """Arch height for a flow of the given magnitude, 0.05 to 0.12."""
    return _clamp(magnitude * 0.1, 0.05, 0.12)


def arch_factor(t: float, height_scale: float) -> float:
    """Radial scale applied to the point at parameter *t*."""
    return 1 + height_scale * math.sin(t * math.pi)


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------


def _to_vector(coord: Coordinate) -> _Vector:
    lat = math.radians(coord.latitude)
    lon = math.radians(coord.longitude)
    return (
        math.cos(lat) * math.cos(lon),
        math.cos(lat) * math.sin(lon),
        math.sin(lat),
    )


def _to_coordinate(vec: _Vector) -> Coordinate:
    x, y, z = vec
    lat = math.atan2(z, math.sqrt(x * x + y * y))
    lon = math.atan2(y, x)
    return Coordinate(math.degrees(lat), math.degrees(lon))


def _perpendicular(p: _Vector) -> _Vector:
    """Unit vector orthogonal to *p*, pointing north (or toward lon 0 at a pole)."""
    for axis in ((0.0, 0.0, 1.0), (1.0, 0.0, 0.0)):
        dot = sum(a * b for a, b in zip(axis, p, strict=True))
        u = tuple(a - dot * b for a, b in zip(axis, p, strict=True))
        norm = math.sqrt(sum(c * c for c in u))
        if norm > 1e-9:
            return (u[0] / norm, u[1] / norm, u[2] / norm)
    return (0.0, 1.0, 0.0)


# ---------------------------------------------------------------------------
# Tessellation
# ---------------------------------------------------------------------------


def _interpolate(
    start: Coordinate,
    end: Coordinate,
    p: _Vector,
    q: _Vector,
    d: float,
    t: float,
    height_scale: float,
) -> Coordinate:
    if d <= COINCIDENT_THRESHOLD_RAD:
        # Short way round the antimeridian.
        d_lon = _wrap_longitude(end.longitude - start.longitude)
        return Coordinate(
            start.latitude + t * (end.latitude - start.latitude),
            _wrap_longitude(start.longitude + t * d_lon),
        )

    if math.pi - d < ANTIPODAL_THRESHOLD_RAD:
        u = _perpendicular(p)
        angle = t * math.pi
        a, b = math.cos(angle), math.sin(angle)
        vec = tuple(a * pc + b * uc for pc, uc in zip(p, u, strict=True))
    else:
        sin_d = math.sin(d)
        a = math.sin((1 - t) * d) / sin_d
        b = math.sin(t * d) / sin_d
        vec = tuple(a * pc + b * qc for pc, qc in zip(p, q, strict=True))

    factor = arch_factor(t, height_scale)
    return _to_coordinate((vec[0] * factor, vec[1] * factor, vec[2] * factor))


def build_arc(
    start: Coordinate,
    end: Coordinate,
    max_segments: int = DEFAULT_MAX_SEGMENTS,
    height_scale: float = DEFAULT_HEIGHT_SCALE,
) -> list[Coordinate]:
    """Tessellate the great-circle path from *start* to *end*.

    Returns ``segment_count(start, end, max_segments) + 1`` points. The
    first and last points are *start* and *end* themselves.
    """
    segments = segment_count(start, end, max_segments)
    d = haversine_radians(start, end)
    p = _to_vector(start)
    q = _to_vector(end)

    if math.pi - d < ANTIPODAL_THRESHOLD_RAD:
        logger.debug(
            "Antipodal arc input %s -> %s; routing through the northward great circle",
            start,
            end,
        )

    points = [start]
    for i in range(1, segments):
        t = i / segments
        points.append(_interpolate(start, end, p, q, d, t, height_scale))
    points.append(end)
    return points


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FlowArc:
    """Everything a renderer needs to draw one flow."""

    flow_id: str
    points: list[Coordinate]
    width: float
    opacity: float


def arc_from_flow(flow: AssetFlow) -> list[Coordinate]:
    """Arc for *flow* with an arch height derived from its magnitude."""
    return build_arc(
        flow.origin,
        flow.destination,
        height_scale=height_scale_for(flow.magnitude),
    )


def describe_flow(flow: AssetFlow) -> FlowArc:
    return FlowArc(
        flow_id=flow.id,
        points=arc_from_flow(flow),
        width=line_width(flow.magnitude),
        opacity=line_opacity(flow.magnitude),
    )
