import pytest

from transit_routes.collectors.osm.context import ResolutionContext
from transit_routes.collectors.osm.fetcher import EntityFetcher
from transit_routes.collectors.osm.models import OSMRelation, OSMMember, RouteRef
from transit_routes.collectors.osm.routes import RouteMaterializer
from transit_routes.collectors.osm.ways import WayResolver
from transit_routes.errors import RouteMaterializationError, WayResolutionError, FetchError


def _route(members, parent=100, tags=None):
    relation = OSMRelation(
        id=200,
        members=tuple(OSMMember(*m) for m in members),
        tags=tags or {"type": "route", "route": "bus"}
    )
    return RouteRef(relation=relation, parent=parent)


@pytest.fixture
def materializer(fake_api):
    fetcher = EntityFetcher(fake_api)
    return RouteMaterializer(fetcher, WayResolver(fetcher), way_workers=2, stop_workers=2)


@pytest.fixture
def three_ways(fake_api):
    for node_id in (1, 2, 3, 4):
        fake_api.add_node(node_id, 13.0 + node_id / 10, 52.0 + node_id / 10)
    fake_api.add_way(301, [1, 2])
    fake_api.add_way(302, [2, 99])  # node 99 does not exist
    fake_api.add_way(303, [3, 4])
    return fake_api


def test_one_failing_way_leaves_the_others(three_ways, materializer):
    context = ResolutionContext()
    route = _route([("way", 301, ""), ("way", 302, "forward"), ("way", 303, "backward")])

    materialized = materializer.materialize(route, context)

    assert [w.id for w in materialized.ways] == [301, 303]
    assert [w.role for w in materialized.ways] == ["", "backward"]
    assert materialized.parent == 100
    assert len(context.issues) == 1
    assert context.issues[0].context == "way 302 of route 200"
    assert isinstance(context.issues[0].error, WayResolutionError)


def test_stops_keep_member_order_and_roles(three_ways, materializer):
    context = ResolutionContext()
    three_ways.add_node(10, 13.5, 52.5, delay=0.1)
    three_ways.add_node(11, 13.6, 52.6)
    route = _route([
        ("node", 10, "stop"), ("way", 301, ""), ("node", 404, "platform"), ("node", 11, "platform")
    ])

    materialized = materializer.materialize(route, context)

    assert [(s.node.id, s.role) for s in materialized.stops] == [(10, "stop"), (11, "platform")]
    assert isinstance(context.issues[0].error, FetchError)
    assert context.issues[0].context == "node 404 of route 200"


def test_route_without_resolvable_ways_is_dropped(three_ways, materializer):
    context = ResolutionContext()

    assert materializer.materialize(_route([("way", 302, ""), ("way", 999, "")]), context) is None
    assert isinstance(context.issues[-1].error, RouteMaterializationError)
    assert str(context.issues[-1]) == "materialize: route 200: no resolvable ways"


def test_materialize_all_skips_dropped_routes(three_ways, materializer):
    context = ResolutionContext()
    good = _route([("way", 301, "")])
    bad = RouteRef(
        relation=OSMRelation(id=201, members=(OSMMember("way", 302, ""),), tags={"type": "route"}),
        parent=100
    )

    materialized = materializer.materialize_all([good, bad], context)

    assert [r.id for r in materialized] == [200]


def test_materialize_all_with_no_routes(materializer):
    assert materializer.materialize_all([], ResolutionContext()) == []
