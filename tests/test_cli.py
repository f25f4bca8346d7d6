"""Tests for the command-line interface."""

import socket

import pytest
from typer.testing import CliRunner

from netscope.cli import app
from netscope.config import load_topology, save_topology

runner = CliRunner()


@pytest.fixture
def topology_file(tmp_path, mixed_topology):
    path = tmp_path / "net.yaml"
    save_topology(mixed_topology, path)
    return path


@pytest.fixture
def fast_config(tmp_path):
    path = tmp_path / "monitor.yaml"
    path.write_text("layout:\n  iterations: 50\nlogging:\n  level: WARNING\n")
    return path


class TestLayoutCommand:

    def test_prints_positions(self, topology_file, fast_config):
        result = runner.invoke(app, ["layout", str(topology_file), "--config", str(fast_config), "--seed", "3"])

        assert result.exit_code == 0
        assert "Laying out" in result.stdout
        assert "relay" in result.stdout

    def test_writes_image(self, topology_file, fast_config, tmp_path):
        output = tmp_path / "layout.png"
        result = runner.invoke(app, [
            "layout", str(topology_file), "--config", str(fast_config), "--output", str(output),
        ])

        assert result.exit_code == 0
        assert output.exists()
        assert output.stat().st_size > 0

    def test_missing_topology(self, tmp_path):
        result = runner.invoke(app, ["layout", str(tmp_path / "absent.yaml")])
        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestDemoCommand:

    def test_runs_against_simulator(self, topology_file, fast_config, tmp_path):
        output = tmp_path / "demo.png"
        result = runner.invoke(app, [
            "demo", str(topology_file), "--config", str(fast_config),
            "--ticks", "30", "--seed", "5", "--output", str(output),
        ])

        assert result.exit_code == 0
        assert "Ticks: 30" in result.stdout
        assert "Ready: True" in result.stdout
        assert output.exists()


class TestWatchCommand:

    def test_unreachable_backend(self, fast_config):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        port = listener.getsockname()[1]
        listener.close()

        result = runner.invoke(app, [
            "watch", "--config", str(fast_config), "--host", "127.0.0.1", "--port", str(port),
        ])

        assert result.exit_code == 1
        assert "Could not connect" in result.stdout


class TestGenerateCommand:

    def test_writes_topology(self, tmp_path):
        output = tmp_path / "ring.json"
        result = runner.invoke(app, [
            "generate", "ring", "--relays", "5", "--clients", "2", "--servers", "1",
            "--output", str(output),
        ])

        assert result.exit_code == 0
        topology = load_topology(output)
        assert len(topology.drones) == 5
        assert len(topology.clients) == 2
        assert len(topology.servers) == 1

    def test_invalid_kind(self, tmp_path):
        result = runner.invoke(app, [
            "generate", "mesh", "--relays", "5", "--output", str(tmp_path / "x.yaml"),
        ])
        assert result.exit_code == 1


class TestListComponents:

    @pytest.mark.parametrize("component_type, expected", [
        ("layouts", "fruchterman-reingold"),
        ("topologies", "k-regular"),
        ("commands", "SetReliability"),
        ("events", "TrafficDropped"),
    ])
    def test_lists(self, component_type, expected):
        result = runner.invoke(app, ["list-components", component_type])
        assert result.exit_code == 0
        assert expected in result.stdout

    def test_unknown_type(self):
        result = runner.invoke(app, ["list-components", "widgets"])
        assert "Unknown component type" in result.stdout
