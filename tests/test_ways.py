import pytest

from transit_routes.collectors.osm.fetcher import EntityFetcher
from transit_routes.collectors.osm.models import OSMWay
from transit_routes.collectors.osm.ways import WayResolver
from transit_routes.errors import WayResolutionError


def test_coordinates_follow_node_order_not_completion_order(fake_api):
    # node 1 finishes last, node 3 first
    fake_api.add_node(1, 13.0, 52.0, delay=0.2)
    fake_api.add_node(2, 13.1, 52.1, delay=0.1)
    fake_api.add_node(3, 13.2, 52.2)
    resolver = WayResolver(EntityFetcher(fake_api), max_workers=3)

    resolved = resolver.resolve(OSMWay(id=300, node_ids=(1, 2, 3)), role="forward")

    assert resolved.coordinates == ((13.0, 52.0), (13.1, 52.1), (13.2, 52.2))
    assert resolved.role == "forward"
    assert resolved.id == 300


def test_repeated_nodes_keep_their_positions(fake_api):
    fake_api.add_node(1, 13.0, 52.0)
    fake_api.add_node(2, 13.1, 52.1)
    resolver = WayResolver(EntityFetcher(fake_api))

    resolved = resolver.resolve(OSMWay(id=300, node_ids=(1, 2, 1)))

    assert resolved.coordinates == ((13.0, 52.0), (13.1, 52.1), (13.0, 52.0))


def test_missing_node_discards_the_way(fake_api):
    fake_api.add_node(1, 13.0, 52.0)
    fake_api.add_node(3, 13.2, 52.2)
    resolver = WayResolver(EntityFetcher(fake_api))

    with pytest.raises(WayResolutionError) as exc_info:
        resolver.resolve(OSMWay(id=300, node_ids=(1, 2, 3)))

    assert exc_info.value.way_id == 300
    assert exc_info.value.failed_node_ids == [2]


def test_way_without_nodes(fake_api):
    resolved = WayResolver(EntityFetcher(fake_api)).resolve(OSMWay(id=300, node_ids=()))
    assert resolved.coordinates == ()
