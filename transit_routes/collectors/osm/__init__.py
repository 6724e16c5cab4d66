"""
OpenStreetMap transit route collection module

Modular OSM collector with separate components for:
- API client: OSM API communication
- Cache: Response caching
- Models: Data structures (OSMNode, OSMWay, OSMRelation)
- Parser: Response parsing and normalization
- Fetcher: Single-entity fetching
- Ways: Way-to-coordinates resolution
- Relations: Recursive relation resolution
- Routes: Route materialization
- Collector: Main orchestrator class
"""

from .models import OSMNode, OSMWay, OSMRelation, OSMMember
from .collector import TransitCollector, ResolutionResult

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMRelation",
    "OSMMember",
    "TransitCollector",
    "ResolutionResult",
]
