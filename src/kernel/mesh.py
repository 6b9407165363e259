"""Triangle meshes and ribbon stitching between border polylines.

Lane and road surfaces are modelled as ribbons: two polylines with the
same number of points describe both sides of the surface in matching
parametrisation, and `generate_mesh_from_borders` zips them together
into a strip of triangles.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np


@dataclass
class Mesh3D:
    """Indexed triangle mesh."""

    vertices: List[np.ndarray] = field(default_factory=list)
    """Vertex positions; their order defines the stitching seam."""

    indices: List[int] = field(default_factory=list)
    """Flat list of vertex index triples, one triple per triangle."""

    @property
    def num_triangles(self) -> int:
        return len(self.indices) // 3

    def add_mesh(self, other: "Mesh3D") -> None:
        """Append another mesh, offsetting its indices past our vertices."""
        offset = len(self.vertices)
        self.vertices.extend(np.asarray(v, dtype=float) for v in other.vertices)
        self.indices.extend(idx + offset for idx in other.indices)


def generate_mesh_from_borders(
    inner_border: Sequence[Sequence[float]],
    outer_border: Sequence[Sequence[float]],
) -> Mesh3D:
    """Stitch two border polylines into a triangulated ribbon.

    The vertex buffer is the outer border followed by the inner border in
    reverse, which walks around the ribbon as a closed loop.  Two
    pointers then move from both ends of the buffer towards the middle,
    emitting two triangles per step.

    Parameters
    ----------
    inner_border, outer_border : sequence of (x, y, z)
        Border polylines with the same number of points N.

    Returns
    -------
    Mesh3D
        Mesh with 2N vertices and 2(N - 1) triangles.

    Raises
    ------
    ValueError
        If the borders have different numbers of points.
    """
    if len(inner_border) != len(outer_border):
        raise ValueError("outer and inner border line should have equal number of points")

    mesh = Mesh3D()
    mesh.vertices = [np.asarray(p, dtype=float) for p in outer_border]
    mesh.vertices.extend(np.asarray(p, dtype=float) for p in reversed(inner_border))

    num_pts = len(mesh.vertices)
    r_idx = num_pts - 2
    for l_idx in range(1, num_pts // 2):
        mesh.indices.extend([l_idx, l_idx - 1, r_idx + 1, r_idx, l_idx, r_idx + 1])
        r_idx -= 1

    return mesh
