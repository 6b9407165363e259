"""Piecewise cubic polynomials over the station coordinate.

OpenDRIVE describes lane offsets, superelevation, elevation and lane
widths as sequences of cubic polynomials, each valid from its start
station until the start of the next one.
"""

import bisect
from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Poly3:
    """Cubic polynomial ``a + b*ds + c*ds**2 + d*ds**3`` with ``ds = s - s0``."""
    s0: float
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0

    def get(self, s: float) -> float:
        ds = s - self.s0
        return self.a + self.b * ds + self.c * ds * ds + self.d * ds * ds * ds

    def get_grad(self, s: float) -> float:
        ds = s - self.s0
        return self.b + 2.0 * self.c * ds + 3.0 * self.d * ds * ds


class CubicSpline:
    """Station-ordered sequence of `Poly3` segments."""

    def __init__(self, segments: Iterable[Poly3] = ()):
        self._s0: List[float] = []
        self._polys: List[Poly3] = []
        for poly in segments:
            self.add_segment(poly)

    def add_segment(self, poly: Poly3) -> None:
        """Append a segment; start stations must be strictly increasing."""
        if self._s0 and poly.s0 <= self._s0[-1]:
            raise ValueError(
                f"segment start {poly.s0} must be greater than previous start {self._s0[-1]}"
            )
        self._s0.append(poly.s0)
        self._polys.append(poly)

    @property
    def segments(self) -> List[Poly3]:
        return list(self._polys)

    def _find(self, s: float) -> Optional[Poly3]:
        idx = bisect.bisect_right(self._s0, s) - 1
        if idx < 0:
            return None
        return self._polys[idx]

    def get(self, s: float, default: float = 0.0) -> float:
        """Value at `s`, or `default` before the first segment."""
        poly = self._find(s)
        return default if poly is None else poly.get(s)

    def get_grad(self, s: float, default: float = 0.0) -> float:
        poly = self._find(s)
        return default if poly is None else poly.get_grad(s)

    def __len__(self) -> int:
        return len(self._polys)

    def __repr__(self) -> str:
        return f"CubicSpline({self._polys!r})"
