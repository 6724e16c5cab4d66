"""
Route materialization

Fetches the ways and stops of each terminal route
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
from loguru import logger

from .context import ResolutionContext
from .fetcher import EntityFetcher
from .models import OSMMember, MaterializedRoute, ResolvedWay, RouteRef, RouteStop
from .ways import WayResolver
from ...errors import FetchError, PartialFailure, RouteMaterializationError


class RouteMaterializer:
    """
    Resolves all member ways and nodes of terminal routes

    Route data is rough: sometimes the "forward" ways are the relevant ones,
    sometimes the unroled ones, sometimes both. Stops come with or without
    platforms. Everything is collected with its role and sorted out later.
    """

    def __init__(
        self,
        fetcher: EntityFetcher,
        way_resolver: WayResolver,
        way_workers: int = 1,
        stop_workers: int = 1,
        route_workers: int = 10
    ):
        self.fetcher = fetcher
        self.way_resolver = way_resolver
        self.way_workers = way_workers
        self.stop_workers = stop_workers
        self.route_workers = route_workers

    def materialize_all(self, routes: Sequence[RouteRef], context: ResolutionContext) -> List[MaterializedRoute]:
        """Materialize routes concurrently, dropping those left without ways"""
        if not routes:
            return []

        with ThreadPoolExecutor(max_workers=self.route_workers) as executor:
            results = list(executor.map(lambda route: self.materialize(route, context), routes))

        materialized = [r for r in results if r is not None]
        logger.info(f"Materialized {len(materialized)}/{len(routes)} routes")
        return materialized

    def materialize(self, route: RouteRef, context: ResolutionContext) -> Optional[MaterializedRoute]:
        """
        Fetch all ways and stops of one route

        Members that fail are recorded in the context and left out; the
        survivors keep their member order.

        Returns:
            MaterializedRoute, or None if not a single way could be resolved
        """
        relation = route.relation
        way_members = relation.way_members
        node_members = relation.node_members

        ways: List[Optional[ResolvedWay]] = [None] * len(way_members)
        stops: List[Optional[RouteStop]] = [None] * len(node_members)

        with ThreadPoolExecutor(max_workers=self.way_workers) as way_executor, \
                ThreadPoolExecutor(max_workers=self.stop_workers) as stop_executor:
            way_futures = [way_executor.submit(self._resolve_way, member) for member in way_members]
            stop_futures = [stop_executor.submit(self.fetcher.fetch_node, member.ref) for member in node_members]

            for index, future in enumerate(way_futures):
                member = way_members[index]
                try:
                    ways[index] = future.result()
                except (FetchError, PartialFailure) as e:
                    logger.warning(f"could not fetch way {member.ref} for route {relation.id}: {e}")
                    context.record(f"way {member.ref} of route {relation.id}", e)

            for index, future in enumerate(stop_futures):
                member = node_members[index]
                try:
                    stops[index] = RouteStop(node=future.result(), role=member.role)
                except FetchError as e:
                    logger.warning(f"could not fetch node {member.ref} for route {relation.id}: {e}")
                    context.record(f"node {member.ref} of route {relation.id}", e)

        resolved_ways = [w for w in ways if w is not None]
        if not resolved_ways:
            error = RouteMaterializationError(relation.id)
            logger.warning(f"dropping route {relation.id}: {error}")
            context.record("materialize", error)
            return None

        return MaterializedRoute(
            relation=relation,
            parent=route.parent,
            ways=resolved_ways,
            stops=[s for s in stops if s is not None]
        )

    def _resolve_way(self, member: OSMMember) -> ResolvedWay:
        way = self.fetcher.fetch_way(member.ref)
        return self.way_resolver.resolve(way, role=member.role)
