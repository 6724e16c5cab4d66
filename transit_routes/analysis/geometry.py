"""
Geometry assembly for materialized routes

GeoJSON cannot nest a FeatureCollection per route, so stops and platforms
are left out and every route becomes a single MultiLineString of its track.
"""

from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

from ..config import StyleConfig, get_config
from ..models import RouteGeometry, RouteFeatureCollection

if TYPE_CHECKING:
    from ..collectors.osm.models import MaterializedRoute


class GeometryAssembler:
    """Builds route geometries and presentation tags"""

    def __init__(self, style: Optional[StyleConfig] = None):
        self.style = style or get_config().style

    def build(self, route: "MaterializedRoute") -> RouteGeometry:
        """
        Build the geometry of one route

        Ways whose role is exactly one of the excluded roles ("platform" by
        default) are skipped. Roles that merely contain it, such as
        "platform:service", are kept.
        """
        tags = self.presentation_tags(route)
        segments = [
            list(way.coordinates)
            for way in route.ways
            if way.role not in self.style.excluded_way_roles
        ]
        return RouteGeometry(id=route.id, parent=route.parent, tags=tags, geometry=segments)

    def presentation_tags(self, route: "MaterializedRoute") -> Dict[str, Any]:
        tags: Dict[str, Any] = dict(route.tags)
        tags["id"] = route.id
        tags["parent"] = route.parent

        if "colour" in tags:
            tags["stroke"] = tags["colour"]

        if route.tags.get("route") in self.style.wide_route_types:
            tags["stroke-width"] = self.style.wide_stroke_width
        else:
            tags["stroke-width"] = self.style.default_stroke_width
        return tags

    def build_all(self, routes: Iterable["MaterializedRoute"]) -> List[RouteGeometry]:
        return [self.build(route) for route in routes]

    @staticmethod
    def to_feature_collection(geometries: Iterable[RouteGeometry]) -> RouteFeatureCollection:
        return RouteFeatureCollection(features=[g.to_feature() for g in geometries])
