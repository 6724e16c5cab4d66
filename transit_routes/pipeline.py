"""
Main Pipeline Orchestrator for transit route generation

  1. Input: root relation ids (defaults to the BVG network relations)
  2. Resolve nested route/network/route_master relations to terminal routes
  3. Fetch every way and stop of each route
  4. Assemble one MultiLineString per route
  5. Write a GeoJSON FeatureCollection

Data Sources:
  - OpenStreetMap (API 0.6): relations, ways, nodes
"""

import json
import os
from typing import Iterable, List, NamedTuple, Optional
from loguru import logger

from .config import get_config, validate_config, PipelineConfig
from .collectors import TransitCollector
from .analysis import GeometryAssembler
from .errors import ResolutionIssue
from .models import RouteFeatureCollection


class PipelineResult(NamedTuple):
    collection: RouteFeatureCollection
    errors: List[ResolutionIssue]


class TransitRoutePipeline:
    """
    Main pipeline to generate route geometries from root relations

    Usage:
        pipeline = TransitRoutePipeline()
        result = pipeline.run([53181])
        pipeline.save(result.collection, "output/routes.geojson")
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        cache_dir: Optional[str] = None,
        collector: Optional[TransitCollector] = None
    ):
        self.config = config or get_config()
        validate_config(self.config)
        self.collector = collector or TransitCollector(self.config, cache_dir=cache_dir)

    def run(self, root_ids: Optional[Iterable[int]] = None) -> PipelineResult:
        """
        Resolve root relations and build the FeatureCollection

        Raises:
            FatalError: If no root relation could be resolved
        """
        if root_ids is None:
            root_ids = self.config.default_root_relations
        root_ids = list(root_ids)

        logger.info(f"Starting transit route pipeline for {len(root_ids)} root relations")
        geometries, errors = self.collector.resolve_all(root_ids)

        collection = GeometryAssembler.to_feature_collection(geometries)
        for issue in errors:
            logger.debug(f"skipped: {issue}")

        logger.info(f"Pipeline complete. {len(collection.features)} routes, {len(errors)} skipped entities")
        return PipelineResult(collection=collection, errors=errors)

    @staticmethod
    def to_json(collection: RouteFeatureCollection) -> str:
        return json.dumps(collection.model_dump(), indent="\t", ensure_ascii=False)

    def save(self, collection: RouteFeatureCollection, output_path: str) -> str:
        """Save the FeatureCollection to a GeoJSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.to_json(collection))

        logger.info(f"Saved routes to {output_path}")
        return output_path
