"""
OSM response parser

Parses OSM API 0.6 XML responses into OSMNode, OSMWay and OSMRelation objects
"""

import xml.etree.ElementTree as ET
from typing import Dict, Union

from .models import OSMNode, OSMWay, OSMRelation, OSMMember, ENTITY_KINDS, NODE, WAY
from ...errors import ParseError, MalformedEntityError

OSMEntity = Union[OSMNode, OSMWay, OSMRelation]


class OSMResponseParser:
    """Parses single-entity OSM API responses"""

    @staticmethod
    def parse_raw(text: str) -> ET.Element:
        """
        Parse a raw response body into an element tree

        Raises:
            ParseError: If the body is not well-formed XML
        """
        try:
            return ET.fromstring(text)
        except ET.ParseError as e:
            raise ParseError(f"invalid OSM XML: {e}") from e

    @staticmethod
    def normalize(root: ET.Element) -> OSMEntity:
        """
        Turn a parsed <osm> document into an entity

        The first node, way or relation element in the document is used.
        Member roles that are missing or empty become "".

        Args:
            root: Parsed document root (or the entity element itself)

        Returns:
            OSMNode, OSMWay or OSMRelation

        Raises:
            MalformedEntityError: If the document holds no usable entity
        """
        element = root if root.tag in ENTITY_KINDS else None
        if element is None:
            for child in root:
                if child.tag in ENTITY_KINDS:
                    element = child
                    break
        if element is None:
            raise MalformedEntityError(f"invalid osm data: no node, way or relation in <{root.tag}>")

        entity_id = OSMResponseParser._int_attr(element, "id")
        tags = OSMResponseParser._parse_tags(element)

        if element.tag == NODE:
            lon = OSMResponseParser._float_attr(element, "lon")
            lat = OSMResponseParser._float_attr(element, "lat")
            return OSMNode(id=entity_id, lon=lon, lat=lat, tags=tags)

        if element.tag == WAY:
            node_ids = tuple(OSMResponseParser._int_attr(nd, "ref") for nd in element.findall("nd"))
            return OSMWay(id=entity_id, node_ids=node_ids, tags=tags)

        members = []
        for member in element.findall("member"):
            member_type = member.get("type")
            if member_type not in ENTITY_KINDS:
                raise MalformedEntityError(
                    f"relation {entity_id} has member of unknown type {member_type!r}"
                )
            members.append(OSMMember(
                type=member_type,
                ref=OSMResponseParser._int_attr(member, "ref"),
                role=member.get("role") or ""
            ))
        return OSMRelation(id=entity_id, members=tuple(members), tags=tags)

    def parse(self, text: str) -> OSMEntity:
        """Parse and normalize a response body in one step"""
        return self.normalize(self.parse_raw(text))

    @staticmethod
    def _parse_tags(element: ET.Element) -> Dict[str, str]:
        tags = {}
        for tag in element.findall("tag"):
            key = tag.get("k")
            if key is not None:
                tags[key] = tag.get("v", "")
        return tags

    @staticmethod
    def _int_attr(element: ET.Element, name: str) -> int:
        value = element.get(name)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise MalformedEntityError(f"<{element.tag}> has invalid {name}={value!r}") from None

    @staticmethod
    def _float_attr(element: ET.Element, name: str) -> float:
        value = element.get(name)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise MalformedEntityError(f"<{element.tag}> has invalid {name}={value!r}") from None
