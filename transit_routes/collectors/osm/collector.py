"""
Main transit route collector

Orchestrates all OSM resolution components
"""

from typing import Iterable, List, NamedTuple, Optional, Tuple
from loguru import logger

from .api_client import OSMAPIClient
from .cache import OSMCache
from .context import ResolutionContext
from .fetcher import EntityFetcher
from .relations import RelationResolver
from .routes import RouteMaterializer
from .ways import WayResolver
from ...analysis.geometry import GeometryAssembler
from ...config import get_config, PipelineConfig
from ...errors import FatalError, ResolutionIssue
from ...models import RouteGeometry


class ResolutionResult(NamedTuple):
    geometries: List[RouteGeometry]
    errors: List[ResolutionIssue]


class TransitCollector:
    """
    Collect transit routes from the OSM API

    Resolves root relations down to terminal routes, fetches every way and
    node they reference and assembles one geometry per route. Failures of
    single entities are collected, not raised.

    Usage:
        collector = TransitCollector()
        geometries, errors = collector.resolve_all([53181, 18813])
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        cache_dir: Optional[str] = None,
        api_client: Optional[OSMAPIClient] = None
    ):
        self.config = config or get_config()
        if api_client is None:
            cache = OSMCache(cache_dir or self.config.cache.cache_dir, self.config.cache.max_age_days)
            api_client = OSMAPIClient(self.config.api, cache)
        self.api_client = api_client
        self.geometry_assembler = GeometryAssembler(self.config.style)

    def _build_resolvers(self) -> Tuple[RelationResolver, RouteMaterializer]:
        """Wire a fresh fetcher and resolvers, so any member memo lives for one run"""
        concurrency = self.config.concurrency
        fetcher = EntityFetcher(self.api_client, share_member_cache=self.config.share_member_cache)
        way_resolver = WayResolver(fetcher, max_workers=concurrency.way_node_workers)
        relation_resolver = RelationResolver(fetcher, max_workers=concurrency.relation_workers)
        route_materializer = RouteMaterializer(
            fetcher,
            way_resolver,
            way_workers=concurrency.route_way_workers,
            stop_workers=concurrency.route_stop_workers,
            route_workers=concurrency.relation_workers
        )
        return relation_resolver, route_materializer

    def resolve_all(self, root_ids: Iterable[int]) -> ResolutionResult:
        """
        Resolve root relations into route geometries

        Args:
            root_ids: Relation ids to start from

        Returns:
            ResolutionResult of (geometries, errors); errors holds every
            non-fatal failure with its context

        Raises:
            FatalError: If no root ids are given or every root failed to fetch
        """
        root_ids = list(root_ids)
        if not root_ids:
            raise FatalError("no root relations given")

        context = ResolutionContext()
        relation_resolver, route_materializer = self._build_resolvers()

        logger.info(f"Stage 1: Resolving {len(root_ids)} root relations...")
        relation_resolver.resolve(root_ids, context)

        distinct_roots = set(root_ids)
        if distinct_roots <= context.unreachable:
            for issue in context.issues:
                logger.error(str(issue))
            raise FatalError(f"all {len(distinct_roots)} root relations failed to fetch")

        logger.info(f"Stage 2: Materializing {len(context.routes)} routes...")
        materialized = route_materializer.materialize_all(context.routes, context)

        logger.info("Stage 3: Assembling geometries...")
        geometries = self.geometry_assembler.build_all(materialized)

        errors = context.issues
        logger.info(f"Resolved {len(geometries)} routes with {len(errors)} non-fatal errors")
        return ResolutionResult(geometries=geometries, errors=errors)
