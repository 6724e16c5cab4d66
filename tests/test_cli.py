import json

import pytest

import cli
from transit_routes.collectors.osm.collector import TransitCollector
from transit_routes.pipeline import TransitRoutePipeline


@pytest.fixture
def wired(monkeypatch, tram_network, config):
    monkeypatch.setattr(cli, "get_config", lambda: config)
    monkeypatch.setattr(
        cli, "TransitRoutePipeline",
        lambda config: TransitRoutePipeline(config=config, collector=TransitCollector(config, api_client=tram_network))
    )
    monkeypatch.setattr(cli, "OSMAPIClient", lambda api, cache: tram_network)
    monkeypatch.setattr(cli, "setup_logging", lambda verbose=False: None)
    return tram_network


def test_generate_to_stdout(wired, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["cli.py", "generate", "--relations", "100", "--no-cache"])

    assert cli.main() == 0

    data = json.loads(capsys.readouterr().out)
    assert [f["properties"]["id"] for f in data["features"]] == [200]


def test_generate_fatal_exit_code(wired, monkeypatch):
    monkeypatch.setattr("sys.argv", ["cli.py", "generate", "--relations", "999"])
    assert cli.main() == 1


def test_relation_command(wired, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["cli.py", "relation", "200"])

    assert cli.main() == 0

    info = json.loads(capsys.readouterr().out)
    assert info["classification"] == "terminal"
    assert info["members"]["way"] == {"": [300]}
    assert info["members"]["node"] == {"stop": [1]}


def test_no_command_prints_help(monkeypatch):
    monkeypatch.setattr("sys.argv", ["cli.py"])
    assert cli.main() == 1
