"""Unit tests for the road coordinate engine."""

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from src.roadmodel.lanes import Lane, LaneSection
from src.roadmodel.refline import ArcGeometry, LineGeometry, RefLine
from src.roadmodel.road import Road
from src.roadmodel.spline import CubicSpline, Poly3


def _straight_road(length: float = 100.0, hdg: float = 0.0, x0: float = 0.0, y0: float = 0.0) -> Road:
    ref_line = RefLine(1, length)
    ref_line.add_geometry(LineGeometry(0.0, x0, y0, hdg, length))
    return Road(length, 1, ref_line=ref_line)


def _add_section(road: Road, s0: float, widths=((1, 3.0), (-1, 3.5))) -> LaneSection:
    section = road.add_lanesection(LaneSection(road.id, s0))
    section.add_lane(Lane(0, road.id, s0))
    for lane_id, width in widths:
        section.add_lane(Lane(lane_id, road.id, s0, CubicSpline([Poly3(0.0, a=width)])))
    return section


class StubReferenceLine:
    """Reference line following the diagonal y = x at height 5.

    Exposes only the members a road consumes.
    """

    def position_and_heading(self, s):
        return np.array([s / math.sqrt(2), s / math.sqrt(2), 5.0]), math.pi / 4

    def get_grad(self, s):
        return np.array([1.0, 1.0, 0.0]) / math.sqrt(2)

    def approximate_linear(self, eps, s_start, s_end):
        return [s_start, s_end]


class TestLaneSectionLookup:
    """Test suite for lane section lookup."""

    def test_floor_lookup(self):
        """Each station maps to the section with the greatest start <= s."""
        road = _straight_road()
        for s0 in (60.0, 0.0, 30.0):
            _add_section(road, s0)

        assert road.get_lanesection(0.0).s0 == 0.0
        assert road.get_lanesection(29.999).s0 == 0.0
        assert road.get_lanesection(30.0).s0 == 30.0
        assert road.get_lanesection(59.9).s0 == 30.0
        assert road.get_lanesection(60.0).s0 == 60.0
        assert road.get_lanesection(99.99).s0 == 60.0

    def test_every_station(self):
        """The section of every station is the unique floor key."""
        road = _straight_road()
        keys = [0.0, 12.5, 40.0, 77.0]
        for s0 in keys:
            _add_section(road, s0)

        for s in np.linspace(0.0, 99.999, 500):
            expected = max(k for k in keys if k <= s)
            assert road.get_lanesection(s).s0 == expected
            assert road.get_lanesection_s0(s) == expected

    def test_out_of_range(self):
        """Stations off the road have no section; the road end clamps."""
        road = _straight_road()
        _add_section(road, 0.0)
        _add_section(road, 50.0)

        assert road.get_lanesection(-0.1) is None
        assert road.get_lanesection(100.1) is None
        assert road.get_lanesection(float("nan")) is None
        assert road.get_lanesection(100.0).s0 == 50.0
        assert _straight_road().get_lanesection(10.0) is None

    def test_get_lanesections_in_station_order(self):
        """Sections are returned ordered by start station."""
        road = _straight_road()
        for s0 in (60.0, 0.0, 30.0):
            _add_section(road, s0)

        sections = road.get_lanesections()

        assert [ls.s0 for ls in sections] == [0.0, 30.0, 60.0]
        assert road.get_lanesection_end(sections[0]) == 30.0
        assert road.get_lanesection_end(sections[-1]) == 100.0

    def test_add_lanesection_rejects_invalid(self):
        """Foreign, duplicated and out-of-range sections are rejected."""
        road = _straight_road()
        _add_section(road, 0.0)

        with pytest.raises(ValueError):
            road.add_lanesection(LaneSection(2, 10.0))
        with pytest.raises(ValueError):
            road.add_lanesection(LaneSection(1, 0.0))
        with pytest.raises(ValueError):
            road.add_lanesection(LaneSection(1, 100.0))
        with pytest.raises(ValueError):
            road.add_lanesection(LaneSection(1, -1.0))

    def test_negative_length(self):
        """Roads cannot have a negative length."""
        with pytest.raises(ValueError):
            Road(-1.0, 1)


class TestGetLane:
    """Test suite for lane lookup."""

    def test_get_lane(self):
        """Lanes are resolved through the section at s."""
        road = _straight_road()
        _add_section(road, 0.0)
        _add_section(road, 50.0, widths=((1, 3.0), (2, 3.0), (-1, 3.5)))

        assert road.get_lane(10.0, 1.0).id == 1
        assert road.get_lane(10.0, -2.0).id == -1
        assert road.get_lane(10.0, 4.0) is None
        assert road.get_lane(60.0, 4.0).id == 2

    def test_get_lane_miss(self):
        """Misses return None instead of raising."""
        road = _straight_road()
        _add_section(road, 0.0)

        assert road.get_lane(-5.0, 0.5) is None
        assert road.get_lane(150.0, 0.5) is None
        assert _straight_road().get_lane(5.0, 0.5) is None

    def test_lane_matches_world_position(self):
        """A point placed at (s, t) lies in the lane returned for (s, t)."""
        road = _straight_road()
        road.lane_offset = CubicSpline([Poly3(0.0, a=1.0)])
        _add_section(road, 0.0)

        xyz = road.get_xyz(20.0, 2.0, 0.0)

        assert xyz[1] == pytest.approx(3.0)
        assert road.get_lane(20.0, 2.0).id == 1


class TestCoordinates:
    """Test suite for world coordinates and frames."""

    def test_straight_road(self):
        """Flat straight road: position, lateral and vertical offsets add up."""
        hdg = 0.3
        road = _straight_road(hdg=hdg, x0=1.0, y0=2.0)
        s, t, z = 40.0, 1.5, 0.7

        xyz = road.get_xyz(s, t, z)

        expected = (
            np.array([1.0 + s * math.cos(hdg), 2.0 + s * math.sin(hdg), 0.0])
            + t * np.array([-math.sin(hdg), math.cos(hdg), 0.0])
            + z * np.array([0.0, 0.0, 1.0])
        )
        np.testing.assert_allclose(xyz, expected, atol=1e-12)
        np.testing.assert_allclose(road.get_surface_pt(s, t), expected - [0.0, 0.0, z], atol=1e-12)

    def test_lane_offset(self):
        """The lane offset shifts the frame origin along the lateral axis."""
        road = _straight_road()
        road.lane_offset = CubicSpline([Poly3(0.0, a=0.5, b=0.01)])

        np.testing.assert_allclose(road.get_xyz(10.0, 0.0, 0.0), [10.0, 0.6, 0.0], atol=1e-12)
        np.testing.assert_allclose(road.get_xyz(10.0, -2.0, 0.0), [10.0, -1.4, 0.0], atol=1e-12)

    def test_superelevation(self):
        """Superelevation tilts the lateral and up axes about the heading."""
        road = _straight_road()
        theta = 0.1
        road.superelevation = CubicSpline([Poly3(0.0, a=theta)])

        np.testing.assert_allclose(
            road.get_xyz(10.0, 2.0, 0.0), [10.0, 2.0 * math.cos(theta), 2.0 * math.sin(theta)], atol=1e-12
        )
        np.testing.assert_allclose(
            road.get_xyz(10.0, 0.0, 1.0), [10.0, -math.sin(theta), math.cos(theta)], atol=1e-12
        )

    def test_transformation_matrix(self):
        """The frame has orthonormal axes and reproduces get_xyz."""
        road = _straight_road(hdg=1.1)
        road.superelevation = CubicSpline([Poly3(0.0, a=0.05, b=0.001)])
        road.lane_offset = CubicSpline([Poly3(0.0, a=-0.3)])
        road.ref_line.elevation_profile = CubicSpline([Poly3(0.0, a=2.0, b=0.04)])

        mat = road.get_transformation_matrix(33.0)

        assert mat.shape == (3, 3)
        e_t, e_h = mat[:, 0], mat[:, 1]
        assert np.linalg.norm(e_t) == pytest.approx(1.0)
        assert np.linalg.norm(e_h) == pytest.approx(1.0)
        assert np.dot(e_t, e_h) == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_allclose(mat.dot([1.2, 0.4, 1.0]), road.get_xyz(33.0, 1.2, 0.4))

    def test_external_reference_line(self):
        """Any object with the reference-line interface can drive a road."""
        road = Road(10.0, 5, ref_line=StubReferenceLine())
        s = 4.0 * math.sqrt(2)

        xyz = road.get_xyz(s, math.sqrt(2), 0.0)

        np.testing.assert_allclose(xyz, [3.0, 5.0, 5.0], atol=1e-12)

    def test_concurrent_queries(self):
        """Read-only queries give the same results from several threads."""
        road = _straight_road(hdg=0.4)
        road.superelevation = CubicSpline([Poly3(0.0, a=0.02)])
        _add_section(road, 0.0)
        _add_section(road, 45.0)
        stations = list(np.linspace(0.0, 100.0, 200))

        def query(s):
            return road.get_lanesection(s).s0, tuple(road.get_xyz(s, 1.0, 0.0))

        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = list(pool.map(query, stations))

        assert parallel == [query(s) for s in stations]


class TestMeshes:
    """Test suite for lane and road meshes."""

    def test_lane_border_line(self):
        """Lane borders follow the lane widths and lane offset."""
        road = _straight_road()
        road.lane_offset = CubicSpline([Poly3(0.0, a=0.5)])
        section = _add_section(road, 0.0)

        outer = road.get_lane_border_line(section.id_to_lane[1], 0.0, 100.0, 0.1)
        inner = road.get_lane_border_line(section.id_to_lane[1], 0.0, 100.0, 0.1, outer=False)

        np.testing.assert_allclose(outer, [[0.0, 3.5, 0.0], [100.0, 3.5, 0.0]], atol=1e-12)
        np.testing.assert_allclose(inner, [[0.0, 0.5, 0.0], [100.0, 0.5, 0.0]], atol=1e-12)

    def test_border_samples_width_changes(self):
        """Width polynomial boundaries add border samples."""
        road = _straight_road()
        section = road.add_lanesection(LaneSection(1, 0.0))
        lane = section.add_lane(Lane(-1, 1, 0.0, CubicSpline([Poly3(0.0, a=3.0), Poly3(40.0, a=3.0, b=0.05)])))

        border = road.get_lane_border_line(lane, 0.0, 100.0, 0.1)

        np.testing.assert_allclose(border[:, 0], [0.0, 40.0, 100.0])
        np.testing.assert_allclose(border[-1], [100.0, -6.0, 0.0], atol=1e-12)

    def test_lane_mesh(self):
        """A lane mesh has two vertices per sampled station."""
        road = _straight_road()
        section = _add_section(road, 0.0)

        mesh = road.get_lane_mesh(section.id_to_lane[-1], 0.1)

        assert len(mesh.vertices) == 4
        assert mesh.num_triangles == 2

    def test_road_mesh(self):
        """The road mesh merges all non-centre lanes of all sections."""
        road = _straight_road()
        _add_section(road, 0.0)
        _add_section(road, 50.0)

        mesh = road.get_road_mesh(0.1)

        assert len(mesh.vertices) == 16
        assert mesh.num_triangles == 8
        assert max(mesh.indices) == len(mesh.vertices) - 1

    def test_arc_mesh_has_no_degenerate_triangles(self):
        """Every triangle of a lane mesh along an arc has a positive area."""
        r, length = 10.0, 2.1
        ref_line = RefLine(1, length)
        ref_line.add_geometry(ArcGeometry(0.0, 0.0, 0.0, 0.0, length, curvature=1.0 / r))
        road = Road(length, 1, ref_line=ref_line)
        section = _add_section(road, 0.0)
        eps = r * (1.0 - math.cos(0.7 / (2.0 * r)))

        mesh = road.get_lane_mesh(section.id_to_lane[1], eps)

        vertices = np.array(mesh.vertices)
        for i in range(0, len(mesh.indices), 3):
            a, b, c = vertices[mesh.indices[i:i + 3]]
            assert np.linalg.norm(np.cross(b - a, c - a)) > 1e-9

    def test_bbox(self):
        """The road box spans the outermost lane borders."""
        road = _straight_road()
        road.lane_offset = CubicSpline([Poly3(0.0, a=0.5)])
        _add_section(road, 0.0)

        box = road.get_bbox(0.1)

        np.testing.assert_allclose(box.min, [0.0, -3.0], atol=1e-12)
        np.testing.assert_allclose(box.max, [100.0, 3.5], atol=1e-12)

    def test_bbox_without_lanes(self):
        """Without lanes the box covers the reference line."""
        road = _straight_road(hdg=math.pi / 2)

        box = road.get_bbox(0.1)

        assert box.width == pytest.approx(0.0, abs=1e-9)
        assert box.height == pytest.approx(100.0)
