"""Polyline simplification with the Ramer–Douglas–Peucker algorithm.

The implementation works on points of any dimension (2D lane borders,
3D road outlines, or higher dimensional samples such as ``(s, x, y)``).
The divide-and-conquer split is driven by an explicit work stack rather
than recursion, so near-maximally deviating input cannot exhaust the
interpreter stack.  The retained points are identical to the classic
recursive formulation.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np


def _max_deviation(points: np.ndarray, first: int, last: int, step: int) -> Tuple[float, int]:
    """Largest perpendicular distance of the interior stride points to the chord."""
    interior = np.arange(first + step, last, step)
    if len(interior) == 0:
        return 0.0, first

    direction = points[last] - points[first]
    mag = np.linalg.norm(direction)
    # Coincident endpoints: distances are measured to the start point
    if mag > 0.0:
        direction = direction / mag

    pv = points[interior] - points[first]
    # Remove the component along the chord
    proj = pv.dot(direction)
    perp = pv - np.outer(proj, direction)
    dists = np.linalg.norm(perp, axis=1)

    k = int(np.argmax(dists))
    return float(dists[k]), int(interior[k])


def rdp(
    points: Sequence[Sequence[float]],
    epsilon: float,
    start_idx: int = 0,
    step: int = 1,
    end_idx: Optional[int] = None,
) -> np.ndarray:
    """Simplify a polyline while keeping it within `epsilon` of the input.

    Parameters
    ----------
    points : sequence of points
        Ordered points of shape (N, Dim).
    epsilon : float
        Maximum allowed perpendicular distance of a dropped point to the
        simplified polyline.
    start_idx : int, optional
        First index of the range to simplify.
    step : int, optional
        Stride through the range; only every `step`-th point is
        considered.
    end_idx : int, optional
        Exclusive end of the range.  Defaults to ``len(points)``.

    Returns
    -------
    numpy.ndarray
        Simplified points of shape (M, Dim).  The first point of the
        range and the last stride point are always retained.  A range
        with fewer than two stride points is returned unchanged.
    """
    pts = np.asarray(points, dtype=float)
    if pts.ndim == 1:
        pts = pts.reshape(-1, 1)
    if step < 1:
        raise ValueError("step must be a positive integer")

    end = len(pts) if end_idx is None or end_idx <= 0 else min(end_idx, len(pts))
    if end - start_idx < 2 or step >= end - start_idx:
        return pts[start_idx:end:step].copy()

    last_idx = ((end - start_idx - 1) // step) * step + start_idx

    keep = np.zeros(len(pts), dtype=bool)
    keep[start_idx] = True
    keep[last_idx] = True

    stack: List[Tuple[int, int]] = [(start_idx, last_idx)]
    while stack:
        first, last = stack.pop()
        d_max, d_max_idx = _max_deviation(pts, first, last, step)
        if d_max > epsilon:
            keep[d_max_idx] = True
            stack.append((d_max_idx, last))
            stack.append((first, d_max_idx))

    return pts[keep]
