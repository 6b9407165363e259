"""Id-ordered collection of roads.

`RoadSet` treats two roads with the same id as the same element: the
set is keyed by ``road.id`` rather than by object identity, iterates in
ascending id order and doubles as the arena through which lane
sections and lanes resolve their road id.
"""

from collections.abc import MutableSet
from typing import Dict, Iterable, Iterator, List, Optional

from ..kernel import extract_keys
from ..utils.logging import get_logger
from .road import Road

logger = get_logger(__name__)


class RoadSet(MutableSet):
    """Set of roads ordered and deduplicated by road id.

    Adding a road whose id is already present keeps the road that was
    added first.
    """

    def __init__(self, roads: Iterable[Road] = ()):
        self._id_to_road: Dict[int, Road] = {}
        for road in roads:
            self.add(road)

    def add(self, road: Road) -> None:
        if road.id in self._id_to_road:
            if self._id_to_road[road.id] is not road:
                logger.debug("road %s already present, keeping the existing road", road.id)
            return
        self._id_to_road[road.id] = road

    def discard(self, road: Road) -> None:
        self._id_to_road.pop(road.id, None)

    def __contains__(self, road: object) -> bool:
        road_id = getattr(road, "id", None)
        return road_id is not None and road_id in self._id_to_road

    def __iter__(self) -> Iterator[Road]:
        for road_id in self.ids():
            yield self._id_to_road[road_id]

    def __len__(self) -> int:
        return len(self._id_to_road)

    def __getitem__(self, road_id: int) -> Road:
        return self._id_to_road[road_id]

    def get(self, road_id: int) -> Optional[Road]:
        return self._id_to_road.get(road_id)

    def ids(self) -> List[int]:
        return extract_keys(self._id_to_road)

    def __repr__(self) -> str:
        return f"RoadSet(ids={self.ids()})"
