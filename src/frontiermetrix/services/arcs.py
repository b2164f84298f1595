"""Arc service — validated ``build_arc`` wrapped in a ServiceResult."""

from __future__ import annotations

from frontiermetrix.domain.arcs import (
    DEFAULT_HEIGHT_SCALE,
    DEFAULT_MAX_SEGMENTS,
    build_arc,
    distance_km,
    height_scale_for,
    line_opacity,
    line_width,
)
from frontiermetrix.domain.models import Coordinate
from frontiermetrix.services.result import ServiceResult


def _point(coord: Coordinate) -> dict[str, float]:
    return {"latitude": coord.latitude, "longitude": coord.longitude}


def _invalid(coord: Coordinate) -> bool:
    return (
        not coord.is_finite()
        or not -90 <= coord.latitude <= 90
        or not -180 <= coord.longitude <= 180
    )


def describe_arc(
    start: Coordinate,
    end: Coordinate,
    *,
    max_segments: int = DEFAULT_MAX_SEGMENTS,
    height_scale: float | None = None,
    magnitude: float | None = None,
) -> ServiceResult:
    """Tessellate an arc and report it with its rendering hints.

    Without an explicit *height_scale*, a *magnitude* picks the arch height
    the way flows do; otherwise the default height applies.
    """
    op = "build_arc"
    for label, coord in (("start", start), ("end", end)):
        if _invalid(coord):
            return ServiceResult.failure(
                op,
                "INVALID_COORDINATE",
                f"{label} coordinate out of range: {coord.latitude}, {coord.longitude}",
                detail={label: _point(coord)},
            )
    if max_segments < 1:
        return ServiceResult.failure(
            op, "INVALID_SEGMENTS", f"max_segments must be at least 1, got {max_segments}"
        )

    if height_scale is None:
        height_scale = (
            height_scale_for(magnitude) if magnitude is not None else DEFAULT_HEIGHT_SCALE
        )

    points = build_arc(start, end, max_segments=max_segments, height_scale=height_scale)
    data: dict[str, object] = {
        "start": _point(start),
        "end": _point(end),
        "distance_km": round(distance_km(start, end), 3),
        "segments": len(points) - 1,
        "height_scale": height_scale,
        "points": [_point(p) for p in points],
    }
    if magnitude is not None:
        data["magnitude"] = magnitude
        data["width"] = line_width(magnitude)
        data["opacity"] = line_opacity(magnitude)
    return ServiceResult.success(op, data)
