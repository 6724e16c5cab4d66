"""
OSM data models

Data classes for representing OSM entities and the derived route structures
built from them. Entities are frozen: role and parent information is attached
by wrapping, never by mutating a fetched entity.
"""

from typing import List, Dict, Tuple
from dataclasses import dataclass, field

NODE = "node"
WAY = "way"
RELATION = "relation"
ENTITY_KINDS = (NODE, WAY, RELATION)

Coordinate = Tuple[float, float]  # (lon, lat)


@dataclass(frozen=True)
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lon: float
    lat: float
    tags: Dict[str, str] = field(default_factory=dict, compare=False)

    kind = NODE

    @property
    def coords(self) -> Coordinate:
        return (self.lon, self.lat)


@dataclass(frozen=True)
class OSMWay:
    """Represents an OSM way (ordered node references)"""
    id: int
    node_ids: Tuple[int, ...]
    tags: Dict[str, str] = field(default_factory=dict, compare=False)

    kind = WAY


@dataclass(frozen=True)
class OSMMember:
    """A typed, roled relation member"""
    type: str
    ref: int
    role: str = ""


@dataclass(frozen=True)
class OSMRelation:
    """Represents an OSM relation"""
    id: int
    members: Tuple[OSMMember, ...]
    tags: Dict[str, str] = field(default_factory=dict, compare=False)

    kind = RELATION

    def _members_of(self, member_type: str) -> List[OSMMember]:
        return [m for m in self.members if m.type == member_type]

    @property
    def node_members(self) -> List[OSMMember]:
        return self._members_of(NODE)

    @property
    def way_members(self) -> List[OSMMember]:
        return self._members_of(WAY)

    @property
    def relation_members(self) -> List[OSMMember]:
        return self._members_of(RELATION)

    def members_by_role(self, member_type: str) -> Dict[str, List[int]]:
        """Member ids of one type grouped by role, in member order"""
        grouped: Dict[str, List[int]] = {}
        for member in self._members_of(member_type):
            grouped.setdefault(member.role, []).append(member.ref)
        return grouped


@dataclass(frozen=True)
class RouteRef:
    """A terminal route relation and the relation that referenced it (0 for roots)"""
    relation: OSMRelation
    parent: int = 0

    @property
    def id(self) -> int:
        return self.relation.id


@dataclass(frozen=True)
class ResolvedWay:
    """A way with its node coordinates, in node order"""
    way: OSMWay
    coordinates: Tuple[Coordinate, ...]
    role: str = ""

    @property
    def id(self) -> int:
        return self.way.id


@dataclass(frozen=True)
class RouteStop:
    """A stop or platform node with its role in the route"""
    node: OSMNode
    role: str = ""


@dataclass
class MaterializedRoute:
    """A terminal route with all its ways and stops resolved"""
    relation: OSMRelation
    parent: int
    ways: List[ResolvedWay]
    stops: List[RouteStop] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.relation.id

    @property
    def tags(self) -> Dict[str, str]:
        return self.relation.tags
