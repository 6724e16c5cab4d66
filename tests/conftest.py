"""
Shared fixtures: an in-memory OSM API serving canned XML responses
"""

import threading
import time
from collections import Counter
from typing import Dict, Iterable, Optional, Tuple

import pytest

from transit_routes.config import PipelineConfig
from transit_routes.errors import TransportError

API_URL = "https://osm.test/api/0.6"


def _tags_xml(tags: Optional[Dict[str, str]]) -> str:
    return "".join(f'<tag k="{k}" v="{v}"/>' for k, v in (tags or {}).items())


def node_xml(node_id: int, lon: float, lat: float, tags: Optional[Dict[str, str]] = None) -> str:
    return (
        f'<?xml version="1.0" encoding="UTF-8"?><osm version="0.6">'
        f'<node id="{node_id}" lat="{lat}" lon="{lon}">{_tags_xml(tags)}</node></osm>'
    )


def way_xml(way_id: int, node_ids: Iterable[int], tags: Optional[Dict[str, str]] = None) -> str:
    nds = "".join(f'<nd ref="{n}"/>' for n in node_ids)
    return f'<osm version="0.6"><way id="{way_id}">{nds}{_tags_xml(tags)}</way></osm>'


def relation_xml(
    relation_id: int,
    members: Iterable[Tuple[str, int, str]],
    tags: Optional[Dict[str, str]] = None
) -> str:
    items = "".join(f'<member type="{t}" ref="{ref}" role="{role}"/>' for t, ref, role in members)
    return f'<osm version="0.6"><relation id="{relation_id}">{items}{_tags_xml(tags)}</relation></osm>'


class FakeOSMAPI:
    """Stands in for OSMAPIClient: serves registered entities, counts requests"""

    def __init__(self):
        self.responses: Dict[str, str] = {}
        self.delays: Dict[str, float] = {}
        self.failures: Dict[str, TransportError] = {}
        self.requests: Counter = Counter()
        self._lock = threading.Lock()

    def url_for(self, kind: str, entity_id: int) -> str:
        return f"{API_URL}/{kind}/{entity_id}"

    def get(self, url: str) -> str:
        with self._lock:
            self.requests[url] += 1
        delay = self.delays.get(url)
        if delay:
            time.sleep(delay)
        if url in self.failures:
            raise self.failures[url]
        if url not in self.responses:
            raise TransportError(f"OSM API HTTP 404: {url}", status_code=404)
        return self.responses[url]

    def add_node(self, node_id, lon, lat, tags=None, delay=0.0):
        url = self.url_for("node", node_id)
        self.responses[url] = node_xml(node_id, lon, lat, tags)
        self.delays[url] = delay

    def add_way(self, way_id, node_ids, tags=None):
        self.responses[self.url_for("way", way_id)] = way_xml(way_id, node_ids, tags)

    def add_relation(self, relation_id, members, tags=None):
        self.responses[self.url_for("relation", relation_id)] = relation_xml(relation_id, members, tags)

    def add_raw(self, kind, entity_id, body):
        self.responses[self.url_for(kind, entity_id)] = body

    def fail(self, kind, entity_id, status_code=None, timed_out=False):
        url = self.url_for(kind, entity_id)
        self.failures[url] = TransportError(f"failed: {url}", status_code=status_code, timed_out=timed_out)

    def count(self, kind: str, entity_id: int) -> int:
        return self.requests[self.url_for(kind, entity_id)]


@pytest.fixture
def fake_api():
    return FakeOSMAPI()


@pytest.fixture
def config():
    cfg = PipelineConfig()
    cfg.cache.cache_dir = None
    cfg.api.osm_api_url = API_URL
    cfg.api.retry_delay = 0.0
    return cfg


@pytest.fixture
def tram_network(fake_api):
    """route_master 100 -> route 200 (tram, red) -> way 300 -> nodes 1, 2"""
    fake_api.add_relation(100, [("relation", 200, "")], {"type": "route_master", "route_master": "tram"})
    fake_api.add_relation(
        200,
        [("way", 300, ""), ("node", 1, "stop")],
        {"type": "route", "route": "tram", "colour": "#ff0000", "name": "M10"}
    )
    fake_api.add_way(300, [1, 2])
    fake_api.add_node(1, 13.0, 52.5)
    fake_api.add_node(2, 13.1, 52.6)
    return fake_api
