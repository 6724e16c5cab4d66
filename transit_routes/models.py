"""
Pydantic models for the route output
Serialized as a GeoJSON FeatureCollection of MultiLineStrings
"""

from typing import List, Dict, Any, Literal, Tuple
from pydantic import BaseModel, Field


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONMultiLineString(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...], ...]


class RouteFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: Dict[str, Any] = Field(default_factory=dict)
    geometry: GeoJSONMultiLineString


class RouteFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[RouteFeature] = Field(default_factory=list)


# ============================================================
# Route Models
# ============================================================

class RouteGeometry(BaseModel):
    """One route as a multi-segment line with presentation tags"""
    id: int
    parent: int = 0
    tags: Dict[str, Any] = Field(default_factory=dict)
    geometry: List[List[Tuple[float, float]]] = Field(default_factory=list)  # segments of (lon, lat)

    def to_feature(self) -> RouteFeature:
        return RouteFeature(
            properties=dict(self.tags),
            geometry=GeoJSONMultiLineString(
                coordinates=[[list(point) for point in segment] for segment in self.geometry]
            )
        )
