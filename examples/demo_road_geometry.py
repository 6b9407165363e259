"""Demo script for the road coordinate engine.

Builds a small synthetic road (a straight followed by a left-hand arc,
with a lane offset, superelevation and two lane sections), queries a
few road-frame points and builds the road surface mesh.

Usage:
    python examples/demo_road_geometry.py --config configs/roadgeom.yaml
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.kernel import rdp
from src.qa import RoadModelQA
from src.roadmodel import (
    ArcGeometry,
    CubicSpline,
    Lane,
    LaneSection,
    LineGeometry,
    Poly3,
    RefLine,
    Road,
    RoadSet,
)
from src.utils import KernelSettings, get_logger

logger = get_logger("demo_road_geometry")


def create_synthetic_road(road_id: int = 1) -> Road:
    """Create a 150 m road with two lane sections."""
    ref_line = RefLine(road_id, 150.0)
    ref_line.add_geometry(LineGeometry(s0=0.0, x0=0.0, y0=0.0, hdg0=0.0, length=100.0))
    ref_line.add_geometry(ArcGeometry(s0=100.0, x0=100.0, y0=0.0, hdg0=0.0, length=50.0, curvature=0.01))

    road = Road(150.0, road_id, ref_line=ref_line)
    road.lane_offset = CubicSpline([Poly3(0.0, a=0.5)])
    road.superelevation = CubicSpline([Poly3(0.0), Poly3(100.0, a=0.0, b=0.001)])

    for s0, n_lanes in ((0.0, 1), (80.0, 2)):
        lanesection = road.add_lanesection(LaneSection(road_id, s0))
        lanesection.add_lane(Lane(0, road_id, s0))
        for i in range(1, n_lanes + 1):
            for lane_id in (i, -i):
                width = CubicSpline([Poly3(0.0, a=3.5)])
                lanesection.add_lane(Lane(lane_id, road_id, s0, width))
    return road


def main() -> int:
    parser = argparse.ArgumentParser(description="Road geometry demo")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with kernel settings")
    args = parser.parse_args()

    settings = KernelSettings.from_config(args.config) if args.config else KernelSettings.from_config()

    roads = RoadSet([create_synthetic_road(2), create_synthetic_road(1)])
    road = roads[1]
    logger.info("Road set: %s", roads)
    logger.info("QA: %s", RoadModelQA().run(road))

    for s, t in ((10.0, 1.0), (90.0, -5.0), (120.0, 8.0)):
        lane = road.get_lane(s, t)
        xyz = road.get_xyz(s, t, 0.0)
        logger.info("s=%.1f t=%.1f -> lane %s at %s", s, t, None if lane is None else lane.id, xyz.round(3))

    line = road.ref_line.get_line(0.0, road.length, settings.rdp_epsilon)
    logger.info("Reference line simplified to %d points (%d after a second pass)",
                len(line), len(rdp(line, settings.rdp_epsilon)))

    mesh = road.get_road_mesh(settings.mesh_epsilon)
    logger.info("Road mesh: %d vertices, %d triangles, bbox %s",
                len(mesh.vertices), mesh.num_triangles, road.get_bbox(settings.mesh_epsilon))
    return 0


if __name__ == "__main__":
    sys.exit(main())
