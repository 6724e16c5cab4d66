"""
Way resolution

Fetches every node of a way and assembles its coordinate sequence
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from loguru import logger

from .fetcher import EntityFetcher
from .models import OSMWay, ResolvedWay, Coordinate
from ...errors import FetchError, WayResolutionError


class WayResolver:
    """Resolves ways into ordered coordinate sequences"""

    def __init__(self, fetcher: EntityFetcher, max_workers: int = 3):
        self.fetcher = fetcher
        self.max_workers = max_workers

    def resolve(self, way: OSMWay, role: str = "") -> ResolvedWay:
        """
        Resolve all nodes of a way

        Nodes are fetched in parallel (at most max_workers at a time) and
        written back by position, so completion order never reorders them.

        Args:
            way: The way to resolve
            role: Role of the way in its route, carried on the result

        Returns:
            ResolvedWay with one coordinate per node id

        Raises:
            WayResolutionError: If any node could not be fetched
        """
        coordinates: List[Optional[Coordinate]] = [None] * len(way.node_ids)
        failed: List[int] = []

        if way.node_ids:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self.fetcher.fetch_node, node_id) for node_id in way.node_ids]
                for index, future in enumerate(futures):
                    node_id = way.node_ids[index]
                    try:
                        coordinates[index] = future.result().coords
                    except FetchError as e:
                        logger.debug(f"could not fetch node {node_id} for way {way.id}: {e}")
                        failed.append(node_id)

        if failed:
            raise WayResolutionError(way.id, failed)

        return ResolvedWay(way=way, coordinates=tuple(coordinates), role=role)
