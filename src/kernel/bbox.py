"""Axis-aligned bounding boxes in the XY plane.

`Box2D` is the planar extent used to index roads and lanes spatially.
`get_bbox_for_s_values` estimates the box of a parametric curve from a
set of samples; it only bounds the sampled points, so callers must
sample densely enough near curvature extrema.
"""

from typing import Callable, Iterable, Optional

import numpy as np


class Box2D:
    """Axis-aligned 2D box with cached centre, width and height.

    The box is built from two corner points which are sorted
    componentwise, so ``min <= max`` always holds.  A box of zero area
    (single point) is legal.
    """

    __slots__ = ("_min", "_max", "_center", "_width", "_height")

    def __init__(self, min_pt: Optional[Iterable[float]] = None, max_pt: Optional[Iterable[float]] = None):
        p0 = np.zeros(2) if min_pt is None else np.asarray(min_pt, dtype=float)
        p1 = p0.copy() if max_pt is None else np.asarray(max_pt, dtype=float)
        if p0.shape != (2,) or p1.shape != (2,):
            raise ValueError("box corners must be 2D points")
        self._min = np.minimum(p0, p1)
        self._max = np.maximum(p0, p1)
        self._center = 0.5 * (self._min + self._max)
        self._width = float(self._max[0] - self._min[0])
        self._height = float(self._max[1] - self._min[1])
        for arr in (self._min, self._max, self._center):
            arr.setflags(write=False)

    @property
    def min(self) -> np.ndarray:
        return self._min

    @property
    def max(self) -> np.ndarray:
        return self._max

    @property
    def center(self) -> np.ndarray:
        return self._center

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def contains(self, pt: Iterable[float]) -> bool:
        """Return True if `pt` lies inside or on the boundary of the box."""
        p = np.asarray(pt, dtype=float)
        return bool(np.all(p >= self._min) and np.all(p <= self._max))

    def get_distance(self, pt: Iterable[float]) -> float:
        """Euclidean distance from `pt` to the box.

        Parameters
        ----------
        pt : sequence of float
            Query point (x, y).

        Returns
        -------
        float
            ``0.0`` if the point lies within the box, otherwise the
            distance to the nearest point on the box boundary.
        """
        p = np.asarray(pt, dtype=float)
        nearest = np.clip(p, self._min, self._max)
        return float(np.linalg.norm(p - nearest))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Box2D):
            return NotImplemented
        return bool(np.array_equal(self._min, other._min) and np.array_equal(self._max, other._max))

    def __repr__(self) -> str:
        return f"Box2D(min={self._min.tolist()}, max={self._max.tolist()})"


def get_bbox_for_s_values(s_values: Iterable[float], get_xy: Callable[[float], Iterable[float]]) -> Box2D:
    """Bounding box of a parametric curve evaluated at discrete samples.

    Parameters
    ----------
    s_values : iterable of float
        Parameter values at which the curve is sampled.
    get_xy : callable
        Projection from a parameter value to a 2D point.

    Returns
    -------
    Box2D
        Componentwise min/max of all sampled points.
    """
    points = np.array([np.asarray(get_xy(s), dtype=float)[:2] for s in s_values])
    if len(points) == 0:
        raise ValueError("at least one s value is required to compute a bounding box")
    return Box2D(points.min(axis=0), points.max(axis=0))
