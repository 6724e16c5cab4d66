import json

import pytest

from transit_routes.collectors.osm.collector import TransitCollector
from transit_routes.errors import FatalError
from transit_routes.pipeline import TransitRoutePipeline


@pytest.fixture
def pipeline(tram_network, config):
    config.default_root_relations = [100]
    return TransitRoutePipeline(config=config, collector=TransitCollector(config, api_client=tram_network))


def test_run_uses_default_roots(pipeline):
    result = pipeline.run()
    assert [f.properties["id"] for f in result.collection.features] == [200]
    assert result.errors == []


def test_save_writes_geojson(pipeline, tmp_path):
    result = pipeline.run([100])
    output_path = str(tmp_path / "out" / "routes.geojson")

    assert pipeline.save(result.collection, output_path) == output_path

    with open(output_path, encoding="utf-8") as f:
        data = json.load(f)
    feature = data["features"][0]
    assert data["type"] == "FeatureCollection"
    assert feature["type"] == "Feature"
    assert feature["geometry"] == {
        "type": "MultiLineString",
        "coordinates": [[[13.0, 52.5], [13.1, 52.6]]],
    }
    assert feature["properties"]["stroke"] == "#ff0000"
    assert feature["properties"]["parent"] == 100


def test_fatal_error_propagates(pipeline):
    with pytest.raises(FatalError):
        pipeline.run([999])


def test_invalid_config_is_rejected(config, fake_api):
    config.concurrency.way_node_workers = 0
    with pytest.raises(ValueError):
        TransitRoutePipeline(config=config, collector=TransitCollector(config, api_client=fake_api))
