"""Road reference lines.

A reference line is the plan-view centre curve of a road, parametrised
by station `s`.  It is composed of line and arc geometries, each valid
from its start station, plus an elevation profile giving the height of
the line above the datum.  Besides position and heading queries the
reference line can be sampled into a polyline within a chord error and
can project a planar point back onto the curve.
"""

import abc
import bisect
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from ..kernel import golden_section_search, rdp
from .spline import CubicSpline

STATION_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Geometry(abc.ABC):
    """Plan-view geometry starting at station `s0` with pose (x0, y0, hdg0)."""
    s0: float
    x0: float
    y0: float
    hdg0: float
    length: float

    @abc.abstractmethod
    def get_xy(self, s: float) -> Tuple[float, float]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_heading(self, s: float) -> float:
        raise NotImplementedError

    @abc.abstractmethod
    def approximate_linear(self, eps: float) -> List[float]:
        """Stations at which the geometry is sampled to stay within `eps`."""
        raise NotImplementedError


@dataclass(frozen=True)
class LineGeometry(Geometry):
    """Straight segment."""

    def get_xy(self, s: float) -> Tuple[float, float]:
        ds = s - self.s0
        return self.x0 + ds * math.cos(self.hdg0), self.y0 + ds * math.sin(self.hdg0)

    def get_heading(self, s: float) -> float:
        return self.hdg0

    def approximate_linear(self, eps: float) -> List[float]:
        return [self.s0, self.s0 + self.length]


@dataclass(frozen=True)
class ArcGeometry(Geometry):
    """Circular arc with constant, non-zero curvature (positive turns left)."""
    curvature: float = 0.0

    def __post_init__(self):
        if self.curvature == 0.0:
            raise ValueError("arc curvature must be non-zero, use LineGeometry instead")

    def get_heading(self, s: float) -> float:
        return self.hdg0 + self.curvature * (s - self.s0)

    def get_xy(self, s: float) -> Tuple[float, float]:
        hdg = self.get_heading(s)
        k = self.curvature
        x = self.x0 + (math.sin(hdg) - math.sin(self.hdg0)) / k
        y = self.y0 + (math.cos(self.hdg0) - math.cos(hdg)) / k
        return x, y

    def approximate_linear(self, eps: float) -> List[float]:
        # Chord of angle da deviates r*(1 - cos(da/2)) from the arc
        r = 1.0 / abs(self.curvature)
        da = 2.0 * math.acos(1.0 - eps / r) if eps < r else math.pi
        ds = max(r * da, 1e-6)
        s_end = self.s0 + self.length
        n = max(1, math.ceil(self.length / ds))
        return [float(s) for s in np.linspace(self.s0, s_end, n + 1)]


class RefLine:
    """Reference line of a road built from plan-view geometries."""

    def __init__(self, road_id: int, length: float):
        self.road_id = road_id
        self.length = length
        self.elevation_profile = CubicSpline()
        self.s0_to_geometry: Dict[float, Geometry] = {}
        self._geometry_keys: List[float] = []

    def add_geometry(self, geometry: Geometry) -> None:
        if geometry.s0 in self.s0_to_geometry:
            raise ValueError(f"road {self.road_id}: duplicate geometry at s={geometry.s0}")
        self.s0_to_geometry[geometry.s0] = geometry
        bisect.insort(self._geometry_keys, geometry.s0)

    def get_geometries(self) -> List[Geometry]:
        return [self.s0_to_geometry[s0] for s0 in self._geometry_keys]

    def get_geometry(self, s: float) -> Geometry:
        """Geometry covering `s`; stations outside the line are clamped."""
        if not self._geometry_keys:
            raise ValueError(f"road {self.road_id}: reference line has no geometries")
        idx = max(bisect.bisect_right(self._geometry_keys, s) - 1, 0)
        return self.s0_to_geometry[self._geometry_keys[idx]]

    def get_xy(self, s: float) -> np.ndarray:
        return np.array(self.get_geometry(s).get_xy(s))

    def get_heading(self, s: float) -> float:
        return self.get_geometry(s).get_heading(s)

    def get_xyz(self, s: float) -> np.ndarray:
        x, y = self.get_geometry(s).get_xy(s)
        return np.array([x, y, self.elevation_profile.get(s)])

    def get_grad(self, s: float) -> np.ndarray:
        """Derivative of the 3D position with respect to `s`."""
        hdg = self.get_heading(s)
        return np.array([math.cos(hdg), math.sin(hdg), self.elevation_profile.get_grad(s)])

    def position_and_heading(self, s: float) -> Tuple[np.ndarray, float]:
        return self.get_xyz(s), self.get_heading(s)

    def approximate_linear(self, eps: float, s_start: float, s_end: float) -> List[float]:
        """Ascending stations in ``[s_start, s_end]`` sampling the line within `eps`.

        The result always contains `s_start` and `s_end`, the start
        station of every geometry in between, and enough intermediate
        samples on arcs to keep the chord error below `eps`.  Stations closer
        than `STATION_TOLERANCE` are merged.
        """
        if eps <= 0.0:
            raise ValueError("eps must be positive")
        s_vals = {s_start, s_end}
        for geometry in self.get_geometries():
            if geometry.s0 > s_end or geometry.s0 + geometry.length < s_start:
                continue
            s_vals.update(s for s in geometry.approximate_linear(eps) if s_start <= s <= s_end)
        stations = sorted(s_vals)
        merged = [stations[0]]
        for s in stations[1:]:
            if s - merged[-1] > STATION_TOLERANCE:
                merged.append(s)
        merged[-1] = stations[-1]
        return merged

    def get_line(self, s_start: float, s_end: float, eps: float) -> np.ndarray:
        """Polyline of shape (N, 3) approximating the line between two stations."""
        s_vals = self.approximate_linear(eps, s_start, s_end)
        points = np.array([self.get_xyz(s) for s in s_vals])
        return rdp(points, eps)

    def match(self, x: float, y: float, tol: float = 1e-4) -> float:
        """Station of the point on the line closest to ``(x, y)``.

        Each geometry is searched independently, which keeps the
        distance function unimodal for lines and arcs shorter than a
        half circle.
        """
        target = np.array([x, y])
        best_s, best_dist = 0.0, math.inf
        for geometry in self.get_geometries():
            def dist2(s: float, geometry: Geometry = geometry) -> float:
                px, py = geometry.get_xy(s)
                return (px - target[0]) ** 2 + (py - target[1]) ** 2

            s = golden_section_search(dist2, geometry.s0, geometry.s0 + geometry.length, tol)
            d = dist2(s)
            if d < best_dist:
                best_s, best_dist = s, d
        return best_s
