"""Road model: reference lines, lane sections and the road coordinate engine."""

from .spline import Poly3, CubicSpline
from .refline import Geometry, LineGeometry, ArcGeometry, RefLine
from .lanes import Lane, LaneSection
from .road import Road
from .roadset import RoadSet

__all__ = [
    "Poly3",
    "CubicSpline",
    "Geometry",
    "LineGeometry",
    "ArcGeometry",
    "RefLine",
    "Lane",
    "LaneSection",
    "Road",
    "RoadSet",
]
