"""Generic numeric and geometry kernel.

Stateless helpers shared by every geometric entity of the road model:
golden-section search, Ramer–Douglas–Peucker simplification, ribbon
mesh stitching and sampled bounding boxes.  All functions are pure and
safe to call concurrently on independent inputs.
"""

from .bbox import Box2D, get_bbox_for_s_values
from .ordered import extract_keys
from .mesh import Mesh3D, generate_mesh_from_borders
from .search import golden_section_search
from .simplify import rdp

__all__ = [
    "Box2D",
    "get_bbox_for_s_values",
    "extract_keys",
    "Mesh3D",
    "generate_mesh_from_borders",
    "golden_section_search",
    "rdp",
]
