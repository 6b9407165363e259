"""Lanes and lane sections.

A lane section is a station interval of a road over which the lane
layout is constant.  Lanes are numbered outwards from the centre lane
(id 0, zero width): positive ids lie to the left of the lane-offset
line, negative ids to the right.  Each lane has a width function over
the section-local station ``ds = s - s0``; lane borders are obtained by
accumulating widths outwards from the centre.

Lanes and lane sections refer to their road by id only; the road is
looked up from a `RoadSet`.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .spline import CubicSpline


@dataclass
class Lane:
    """Single lane of a lane section."""
    id: int
    road_id: int
    lanesection_s0: float
    width: CubicSpline = field(default_factory=CubicSpline)
    """Lane width as a function of the section-local station."""
    type: str = "driving"

    def get_width(self, s: float) -> float:
        return self.width.get(s - self.lanesection_s0)


class LaneSection:
    """Set of lanes valid from station `s0` of road `road_id`."""

    def __init__(self, road_id: int, s0: float):
        self.road_id = road_id
        self.s0 = s0
        self.id_to_lane: Dict[int, Lane] = {}

    def add_lane(self, lane: Lane) -> Lane:
        if lane.road_id != self.road_id or lane.lanesection_s0 != self.s0:
            raise ValueError(
                f"lane {lane.id} belongs to road {lane.road_id} at s={lane.lanesection_s0}, "
                f"not to road {self.road_id} at s={self.s0}"
            )
        if lane.id in self.id_to_lane:
            raise ValueError(f"duplicate lane id {lane.id} in lane section at s={self.s0}")
        self.id_to_lane[lane.id] = lane
        return lane

    def get_lanes(self) -> List[Lane]:
        """Lanes ordered by id, right-most first."""
        return [self.id_to_lane[lane_id] for lane_id in sorted(self.id_to_lane)]

    def get_lane_borders(self, s: float) -> Dict[int, float]:
        """Lateral position of the outer border of every lane at `s`."""
        borders: Dict[int, float] = {}
        if 0 in self.id_to_lane:
            borders[0] = 0.0
        t = 0.0
        for lane_id in sorted(k for k in self.id_to_lane if k > 0):
            t += self.id_to_lane[lane_id].get_width(s)
            borders[lane_id] = t
        t = 0.0
        for lane_id in sorted((k for k in self.id_to_lane if k < 0), reverse=True):
            t -= self.id_to_lane[lane_id].get_width(s)
            borders[lane_id] = t
        return borders

    def get_lane_border(self, lane_id: int, s: float, outer: bool = True) -> float:
        """Outer or inner border of a lane at `s`."""
        borders = self.get_lane_borders(s)
        if lane_id not in borders:
            raise KeyError(f"no lane {lane_id} in lane section at s={self.s0}")
        if outer or lane_id == 0:
            return borders[lane_id]
        inner_id = lane_id - 1 if lane_id > 0 else lane_id + 1
        return borders.get(inner_id, 0.0)

    def lane_at(self, s: float, t: float) -> Optional[Lane]:
        """Lane whose lateral extent contains `t` at station `s`.

        `t` is measured from the lane-offset line.  Borders belong to the
        lane closer to the centre; ``t == 0`` resolves to the centre lane,
        or to the innermost left lane when the section has no centre lane
        (the innermost right lane when it has no left lanes either).
        Returns None when `t` lies beyond the outermost lane.
        """
        borders = self.get_lane_borders(s)
        if t == 0.0 and 0 in self.id_to_lane:
            return self.id_to_lane[0]
        if t >= 0.0:
            candidates = sorted(k for k in borders if k > 0)
            for lane_id in candidates:
                if t <= borders[lane_id]:
                    return self.id_to_lane[lane_id]
        if t <= 0.0:
            candidates = sorted((k for k in borders if k < 0), reverse=True)
            for lane_id in candidates:
                if t >= borders[lane_id]:
                    return self.id_to_lane[lane_id]
        return None

    def __repr__(self) -> str:
        return f"LaneSection(road_id={self.road_id}, s0={self.s0}, lanes={sorted(self.id_to_lane)})"
