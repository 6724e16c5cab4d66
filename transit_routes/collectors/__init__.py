"""
Data collectors for transit route resolution

- TransitCollector: Route relations, ways and nodes from OpenStreetMap
"""

from .osm import TransitCollector

__all__ = [
    "TransitCollector",
]
