"""Derivative-free one-dimensional minimisation."""

import math
from typing import Callable

INVPHI = (math.sqrt(5.0) - 1.0) / 2.0
INVPHI2 = (3.0 - math.sqrt(5.0)) / 2.0


def golden_section_search(f: Callable[[float], float], a: float, b: float, tol: float) -> float:
    """Locate the minimum of a unimodal function on ``[a, b]``.

    The bracket is narrowed by the golden ratio at every iteration and
    one of the two interior probes is reused, so each iteration costs a
    single evaluation of `f`.  The number of iterations is fixed up
    front such that the final bracket is no wider than `tol`.

    Parameters
    ----------
    f : callable
        Function assumed to have a single minimum on ``[a, b]``.
    a, b : float
        Interval bounds.
    tol : float
        Absolute tolerance on the returned argument.

    Returns
    -------
    float
        Argument within `tol` of the minimiser.  If ``b - a <= tol`` the
        midpoint is returned without evaluating `f`.
    """
    if tol <= 0.0:
        raise ValueError("tol must be positive")

    h = b - a
    if h <= tol:
        return 0.5 * (a + b)

    # Required steps to achieve tolerance
    n = int(math.ceil(math.log(tol / h) / math.log(INVPHI)))

    c = a + INVPHI2 * h
    d = a + INVPHI * h
    yc = f(c)
    yd = f(d)

    for _ in range(n - 1):
        h = INVPHI * h
        if yc < yd:
            b = d
            d = c
            yd = yc
            c = a + INVPHI2 * h
            yc = f(c)
        else:
            a = c
            c = d
            yc = yd
            d = a + INVPHI * h
            yd = f(d)

    if yc < yd:
        return 0.5 * (a + d)
    return 0.5 * (c + b)
