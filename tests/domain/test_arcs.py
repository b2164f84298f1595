"""Tests for great-circle arc tessellation."""

import math

import pytest

from frontiermetrix.domain.arcs import (
    arc_from_flow,
    arch_factor,
    build_arc,
    describe_flow,
    distance_km,
    haversine_radians,
    height_scale_for,
    line_opacity,
    line_width,
    segment_count,
)
from frontiermetrix.domain.models import AssetFlow, Coordinate

NEW_YORK = Coordinate(40.71, -74.01)
LONDON = Coordinate(51.51, -0.13)
SYDNEY = Coordinate(-33.87, 151.21)


def _all_finite(points: list[Coordinate]) -> bool:
    return all(p.is_finite() for p in points)


class TestDistance:
    def test_identical_points(self) -> None:
        assert haversine_radians(NEW_YORK, NEW_YORK) == 0.0

    def test_one_degree_on_equator(self) -> None:
        assert distance_km(Coordinate(0, 0), Coordinate(0, 1)) == pytest.approx(111.19, rel=1e-3)

    def test_new_york_london(self) -> None:
        assert distance_km(NEW_YORK, LONDON) == pytest.approx(5570, rel=0.01)

    def test_antipodes_are_half_a_turn(self) -> None:
        assert haversine_radians(Coordinate(0, 0), Coordinate(0, 180)) == pytest.approx(math.pi)

    def test_symmetric(self) -> None:
        assert distance_km(NEW_YORK, SYDNEY) == pytest.approx(distance_km(SYDNEY, NEW_YORK))


class TestSegmentCount:
    def test_short_arc_uses_minimum(self) -> None:
        assert segment_count(Coordinate(0, 0), Coordinate(1, 1)) == 24

    def test_scales_with_distance(self) -> None:
        # ~19,904 km -> 39 segments
        assert segment_count(Coordinate(0, 0), Coordinate(0, 179)) == 39

    def test_capped_by_max_segments(self) -> None:
        assert segment_count(Coordinate(0, 0), Coordinate(0, 179), max_segments=30) == 30

    def test_max_segments_below_minimum(self) -> None:
        assert segment_count(Coordinate(0, 0), Coordinate(1, 1), max_segments=10) == 10

    def test_never_zero(self) -> None:
        assert segment_count(Coordinate(0, 0), Coordinate(1, 1), max_segments=0) == 1


class TestBuildArc:
    def test_short_arc_has_25_points(self) -> None:
        points = build_arc(Coordinate(0, 0), Coordinate(1, 1))
        assert len(points) == 25

    def test_length_is_segments_plus_one(self) -> None:
        for start, end in [(NEW_YORK, LONDON), (NEW_YORK, SYDNEY), (LONDON, SYDNEY)]:
            points = build_arc(start, end)
            assert len(points) == segment_count(start, end) + 1

    def test_endpoints_are_exact(self) -> None:
        points = build_arc(NEW_YORK, SYDNEY)
        assert points[0] == NEW_YORK
        assert points[-1] == SYDNEY

    def test_explicit_max_segments(self) -> None:
        points = build_arc(NEW_YORK, LONDON, max_segments=10)
        assert len(points) == 11

    def test_follows_the_equator(self) -> None:
        points = build_arc(Coordinate(0, 0), Coordinate(0, 90))
        assert len(points) == 25
        for p in points:
            assert p.latitude == pytest.approx(0.0, abs=1e-9)
        mid = points[12]
        assert mid.longitude == pytest.approx(45.0)

    def test_interior_points_lie_between_endpoints(self) -> None:
        points = build_arc(Coordinate(0, 0), Coordinate(0, 90))
        lons = [p.longitude for p in points]
        assert lons == sorted(lons)

    def test_height_scale_keeps_the_ground_track(self) -> None:
        flat = build_arc(NEW_YORK, LONDON, height_scale=0.0)
        arched = build_arc(NEW_YORK, LONDON, height_scale=0.12)
        for a, b in zip(flat, arched, strict=True):
            assert a.latitude == pytest.approx(b.latitude, abs=1e-9)
            assert a.longitude == pytest.approx(b.longitude, abs=1e-9)

    def test_great_circle_bows_poleward(self) -> None:
        # The great circle from New York to London passes north of both.
        points = build_arc(NEW_YORK, LONDON)
        assert max(p.latitude for p in points) > LONDON.latitude


class TestDegenerateInput:
    def test_identical_points(self) -> None:
        point = Coordinate(10, 20)
        points = build_arc(point, point)
        assert len(points) == 25
        for p in points:
            assert p.latitude == pytest.approx(10)
            assert p.longitude == pytest.approx(20)

    def test_nearly_coincident_points(self) -> None:
        start, end = Coordinate(0, 0), Coordinate(0, 0.00001)
        points = build_arc(start, end)
        assert _all_finite(points)
        assert points[0] == start
        assert points[-1] == end

    def test_antipodal_points_are_finite(self) -> None:
        start, end = Coordinate(0, 0), Coordinate(0, 180)
        points = build_arc(start, end, max_segments=200)
        assert len(points) == 41
        assert _all_finite(points)
        assert points[0] == start
        assert points[-1] == end

    def test_antipodal_route_crosses_the_north_pole(self) -> None:
        points = build_arc(Coordinate(0, 0), Coordinate(0, 180), max_segments=200)
        assert points[20].latitude == pytest.approx(90.0)

    def test_pole_to_pole(self) -> None:
        points = build_arc(Coordinate(90, 0), Coordinate(-90, 0))
        assert _all_finite(points)
        mid = points[len(points) // 2]
        assert mid.latitude == pytest.approx(0.0, abs=1e-6)
        assert mid.longitude == pytest.approx(0.0, abs=1e-6)

    def test_antimeridian_crossing(self) -> None:
        points = build_arc(Coordinate(0, 170), Coordinate(0, -170))
        assert _all_finite(points)
        for p in points[1:-1]:
            assert abs(p.longitude) >= 170 - 1e-6

    def test_nearly_coincident_across_antimeridian(self) -> None:
        start, end = Coordinate(0, 179.99995), Coordinate(0, -179.99995)
        points = build_arc(start, end)
        assert points[0] == start
        assert points[-1] == end
        for p in points:
            assert abs(abs(p.longitude) - 180.0) < 1e-3


class TestLineStyle:
    @pytest.mark.parametrize(
        "magnitude,expected",
        [(0.0, 1.0), (0.25, 1.0), (1.0, 2.0), (2.0, 4.0), (2.5, 5.0), (100.0, 5.0)],
    )
    def test_width(self, magnitude: float, expected: float) -> None:
        assert line_width(magnitude) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "magnitude,expected",
        [(0.0, 0.3), (0.6, 0.3), (1.0, 0.5), (2.0, 1.0), (50.0, 1.0)],
    )
    def test_opacity(self, magnitude: float, expected: float) -> None:
        assert line_opacity(magnitude) == pytest.approx(expected)

    def test_monotone_and_bounded(self) -> None:
        mags = [i * 0.1 for i in range(60)]
        widths = [line_width(m) for m in mags]
        alphas = [line_opacity(m) for m in mags]
        assert widths == sorted(widths)
        assert alphas == sorted(alphas)
        assert all(1.0 <= w <= 5.0 for w in widths)
        assert all(0.3 <= a <= 1.0 for a in alphas)

    def test_height_scale_for_magnitude(self) -> None:
        assert height_scale_for(0.1) == pytest.approx(0.05)
        assert height_scale_for(1.0) == pytest.approx(0.1)
        assert height_scale_for(9.0) == pytest.approx(0.12)

    def test_arch_factor_peaks_mid_arc(self) -> None:
        assert arch_factor(0.0, 0.12) == pytest.approx(1.0)
        assert arch_factor(1.0, 0.12) == pytest.approx(1.0)
        assert arch_factor(0.5, 0.12) == pytest.approx(1.12)


class TestFlowArcs:
    def test_arc_from_flow(self, flows: list[AssetFlow]) -> None:
        flow = flows[0]
        points = arc_from_flow(flow)
        assert points[0] == flow.origin
        assert points[-1] == flow.destination
        assert len(points) == segment_count(flow.origin, flow.destination) + 1

    def test_describe_flow(self, flows: list[AssetFlow]) -> None:
        described = describe_flow(flows[0])
        assert described.flow_id == "flow-ny-ldn"
        assert described.width == pytest.approx(3.0)
        assert described.opacity == pytest.approx(0.75)
