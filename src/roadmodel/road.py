"""Road coordinate engine.

A road maps the road-local frame ``(s, t, z)`` to world coordinates:
`s` runs along the reference line, `t` is the lateral offset from the
lane-offset line (positive to the left) and `z` the height above the
road surface.  The local frame at a station is tilted by the
superelevation of the road.

The road also owns its lane sections, keyed by start station, and
resolves the lane section and lane covering an ``(s, t)`` pair.  All
state is written while the road is assembled and only read afterwards,
so queries may run concurrently without locking.
"""

import bisect
import math
from typing import Dict, List, Optional, Protocol, Tuple

import numpy as np

from ..kernel import Box2D, Mesh3D, generate_mesh_from_borders, get_bbox_for_s_values
from ..utils.logging import get_logger
from .lanes import Lane, LaneSection
from .refline import STATION_TOLERANCE, RefLine
from .spline import CubicSpline

logger = get_logger(__name__)


class SplineFunction(Protocol):
    def get(self, s: float) -> float: ...


class ReferenceLine(Protocol):
    """Reference line consumed by `Road`.

    `position_and_heading` gives the frame origin, `get_grad` the
    tangent including elevation, and `approximate_linear` the stations
    at which borders and meshes are sampled.
    """

    def position_and_heading(self, s: float) -> Tuple[np.ndarray, float]: ...

    def get_grad(self, s: float) -> np.ndarray: ...

    def approximate_linear(self, eps: float, s_start: float, s_end: float) -> List[float]: ...


def _normalize(vec: np.ndarray) -> np.ndarray:
    mag = np.linalg.norm(vec)
    if mag > 0.0:
        return vec / mag
    return vec


class Road:
    """Road with a reference line, lane offset, superelevation and lane sections."""

    def __init__(
        self,
        length: float,
        road_id: int,
        junction: int = -1,
        ref_line: Optional[ReferenceLine] = None,
    ):
        if length < 0.0:
            raise ValueError(f"road {road_id}: length must be non-negative, got {length}")
        self.id = road_id
        self.junction = junction
        self.length = length

        self.lane_offset: SplineFunction = CubicSpline()
        self.superelevation: SplineFunction = CubicSpline()
        self.ref_line: ReferenceLine = ref_line if ref_line is not None else RefLine(road_id, length)

        self.s0_to_lanesection: Dict[float, LaneSection] = {}
        self._lanesection_keys: List[float] = []

    def add_lanesection(self, lanesection: LaneSection) -> LaneSection:
        """Register a lane section under its start station."""
        s0 = lanesection.s0
        if lanesection.road_id != self.id:
            raise ValueError(f"lane section belongs to road {lanesection.road_id}, not road {self.id}")
        if not (0.0 <= s0 < self.length) and not (s0 == 0.0 and self.length == 0.0):
            raise ValueError(f"road {self.id}: lane section start {s0} outside [0, {self.length})")
        if s0 in self.s0_to_lanesection:
            raise ValueError(f"road {self.id}: duplicate lane section at s={s0}")
        self.s0_to_lanesection[s0] = lanesection
        bisect.insort(self._lanesection_keys, s0)
        logger.debug("road %s: added lane section at s=%.3f", self.id, s0)
        return lanesection

    def get_lanesection(self, s: float) -> Optional[LaneSection]:
        """Lane section whose interval ``[s0_k, s0_k+1)`` contains `s`.

        The road end ``s == length`` belongs to the last section.
        Returns None for stations off the road or when the road has no
        lane sections.
        """
        if not self._lanesection_keys or not (0.0 <= s <= self.length):
            return None
        idx = bisect.bisect_right(self._lanesection_keys, s) - 1
        if idx < 0:
            return None
        return self.s0_to_lanesection[self._lanesection_keys[idx]]

    def get_lanesection_s0(self, s: float) -> Optional[float]:
        lanesection = self.get_lanesection(s)
        return None if lanesection is None else lanesection.s0

    def get_lanesection_end(self, lanesection: LaneSection) -> float:
        """End station of a lane section: the next section's start or the road length."""
        idx = bisect.bisect_right(self._lanesection_keys, lanesection.s0)
        if idx < len(self._lanesection_keys):
            return self._lanesection_keys[idx]
        return self.length

    def get_lanesections(self) -> List[LaneSection]:
        return [self.s0_to_lanesection[s0] for s0 in self._lanesection_keys]

    def get_lane(self, s: float, t: float) -> Optional[Lane]:
        """Lane containing the road-frame point ``(s, t)``, or None."""
        lanesection = self.get_lanesection(s)
        if lanesection is None:
            return None
        return lanesection.lane_at(s, t)

    def get_transformation_matrix(self, s: float) -> np.ndarray:
        """Local-to-world frame at station `s`.

        Returns
        -------
        numpy.ndarray
            3×3 matrix whose columns are the lateral axis, the up axis
            and the origin of the lane-offset line, so that
            ``M @ [t, z, 1]`` is the world position of ``(s, t, z)``.
        """
        s_vec = _normalize(np.asarray(self.ref_line.get_grad(s), dtype=float))
        theta = self.superelevation.get(s)
        cos_t, sin_t = math.cos(theta), math.sin(theta)

        e_t = _normalize(np.array([
            cos_t * -s_vec[1] + sin_t * -s_vec[2] * s_vec[0],
            cos_t * s_vec[0] + sin_t * -s_vec[2] * s_vec[1],
            sin_t * (s_vec[0] * s_vec[0] + s_vec[1] * s_vec[1]),
        ]))
        e_h = _normalize(np.cross(s_vec, e_t))
        ref_pt, _ = self.ref_line.position_and_heading(s)
        p0 = np.asarray(ref_pt, dtype=float) + self.lane_offset.get(s) * e_t

        return np.column_stack([e_t, e_h, p0])

    def get_xyz(self, s: float, t: float, z: float) -> np.ndarray:
        """World position of the road-frame point ``(s, t, z)``."""
        return self.get_transformation_matrix(s).dot(np.array([t, z, 1.0]))

    def get_surface_pt(self, s: float, t: float) -> np.ndarray:
        return self.get_xyz(s, t, 0.0)

    def _border_s_values(self, lane: Lane, s_start: float, s_end: float, eps: float) -> List[float]:
        s_vals = list(self.ref_line.approximate_linear(eps, s_start, s_end))
        for poly in lane.width.segments:
            s_width = lane.lanesection_s0 + poly.s0
            if s_start < s_width < s_end and all(abs(s_width - s) > STATION_TOLERANCE for s in s_vals):
                s_vals.append(s_width)
        return sorted(s_vals)

    def get_lane_border_line(
        self,
        lane: Lane,
        s_start: float,
        s_end: float,
        eps: float,
        outer: bool = True,
    ) -> np.ndarray:
        """Lane border between two stations as an (N, 3) polyline."""
        lanesection = self.s0_to_lanesection[lane.lanesection_s0]
        s_vals = self._border_s_values(lane, s_start, s_end, eps)
        return np.array([
            self.get_xyz(s, lanesection.get_lane_border(lane.id, s, outer), 0.0) for s in s_vals
        ])

    def get_lane_mesh(self, lane: Lane, eps: float) -> Mesh3D:
        """Triangulated surface of a lane over its whole lane section."""
        lanesection = self.s0_to_lanesection[lane.lanesection_s0]
        s_start = lanesection.s0
        s_end = self.get_lanesection_end(lanesection)
        inner = self.get_lane_border_line(lane, s_start, s_end, eps, outer=False)
        outer = self.get_lane_border_line(lane, s_start, s_end, eps, outer=True)
        return generate_mesh_from_borders(inner, outer)

    def get_road_mesh(self, eps: float) -> Mesh3D:
        """Merged mesh of all lanes of the road, centre lanes excluded."""
        mesh = Mesh3D()
        for lanesection in self.get_lanesections():
            for lane in lanesection.get_lanes():
                if lane.id == 0:
                    continue
                mesh.add_mesh(self.get_lane_mesh(lane, eps))
        logger.debug("road %s: mesh with %d triangles", self.id, mesh.num_triangles)
        return mesh

    def get_bbox(self, eps: float) -> Box2D:
        """Planar bounding box of the outermost lane borders of the road."""
        boxes: List[Box2D] = []
        for lanesection in self.get_lanesections():
            s_vals = self.ref_line.approximate_linear(eps, lanesection.s0, self.get_lanesection_end(lanesection))
            lane_ids = sorted(lanesection.id_to_lane)
            if not lane_ids:
                continue
            for lane_id in {lane_ids[0], lane_ids[-1]}:
                def border_xy(s: float, lane_id: int = lane_id, lanesection: LaneSection = lanesection) -> np.ndarray:
                    return self.get_xyz(s, lanesection.get_lane_border(lane_id, s), 0.0)[:2]

                boxes.append(get_bbox_for_s_values(s_vals, border_xy))
        if not boxes:
            s_vals = self.ref_line.approximate_linear(eps, 0.0, self.length)
            return get_bbox_for_s_values(s_vals, lambda s: self.get_xyz(s, 0.0, 0.0)[:2])
        return Box2D(
            np.min([box.min for box in boxes], axis=0),
            np.max([box.max for box in boxes], axis=0),
        )

    def __repr__(self) -> str:
        return f"Road(id={self.id}, junction={self.junction}, length={self.length})"
