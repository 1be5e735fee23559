"""
Unit tests for container configuration validation and inspection parsing.
"""

import json

import pytest

from lightshuttle.core.errors import BadRequest, OutputParseError
from lightshuttle.core.models import (
    AppStatus,
    ContainerConfig,
    InspectRecord,
    parse_port,
    validate_volume,
)
from tests.fixtures.runtime_fixtures import inspect_attrs


class TestContainerConfig:

    def test_valid_config_passes(self, sample_config):
        sample_config.validate()

    def test_host_ports_are_deduplicated_in_order(self):
        cfg = ContainerConfig(name="a", image="b", host_ports=[8081, 8080, 8081], container_port=80)
        assert cfg.host_ports == [8081, 8080]

    @pytest.mark.parametrize("volume", ["/tmp/x", "/a:/b:ro", ":/data", "/tmp/x:", ""])
    def test_bad_volume_rejected(self, volume):
        with pytest.raises(BadRequest) as exc:
            validate_volume(volume)
        assert exc.value.detail == f"Invalid volume format: '{volume}'"

    def test_good_volume_accepted(self):
        validate_volume("/tmp/x:/data")

    def test_empty_name_rejected(self):
        with pytest.raises(BadRequest):
            ContainerConfig(name=" ", image="nginx").validate()

    def test_empty_image_rejected(self):
        with pytest.raises(BadRequest):
            ContainerConfig(name="web", image="").validate()

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_out_of_range_host_port_rejected(self, port):
        with pytest.raises(BadRequest):
            ContainerConfig(name="web", image="nginx", host_ports=[port], container_port=80).validate()

    def test_host_ports_need_container_port(self):
        with pytest.raises(BadRequest):
            ContainerConfig(name="web", image="nginx", host_ports=[8080]).validate()

    def test_no_ports_needs_no_container_port(self):
        ContainerConfig(name="web", image="nginx").validate()

    def test_unknown_restart_policy_rejected(self):
        with pytest.raises(BadRequest) as exc:
            ContainerConfig(name="web", image="nginx", restart_policy="sometimes").validate()
        assert "sometimes" in exc.value.detail


class TestAppStatus:

    @pytest.mark.parametrize("state,expected", [
        ("running", AppStatus.RUNNING),
        ("exited", AppStatus.STOPPED),
        ("created", AppStatus.STOPPED),
        ("paused", AppStatus.STOPPED),
        ("dead", AppStatus.ERROR),
        (None, AppStatus.ERROR),
    ])
    def test_from_state(self, state, expected):
        assert AppStatus.from_state(state) is expected


class TestInspectRecord:

    def test_from_json_uses_first_element(self, sample_config):
        raw = json.dumps([inspect_attrs(sample_config)])
        record = InspectRecord.from_json(raw)
        assert record.container_name == "web"
        assert record.config.image == "nginx:alpine"
        assert record.host_ports() == [8088]

    def test_from_json_rejects_garbage(self):
        with pytest.raises(OutputParseError):
            InspectRecord.from_json("not json")

    def test_from_json_rejects_empty_list(self):
        with pytest.raises(OutputParseError):
            InspectRecord.from_json("[]")

    def test_from_attrs_rejects_wrong_types(self):
        with pytest.raises(OutputParseError):
            InspectRecord.from_attrs({"Config": {"Env": "not-a-list"}})

    def test_unknown_fields_are_ignored(self):
        record = InspectRecord.from_attrs({"Id": "x", "Name": "/n", "Mounts": [], "Driver": "overlay2"})
        assert record.id == "x"
        assert record.config is None

    def test_port_map_falls_back_to_network_settings(self):
        record = InspectRecord.from_attrs({
            "Name": "/web",
            "HostConfig": {"PortBindings": {}},
            "NetworkSettings": {"Ports": {"80/tcp": [{"HostIp": "0.0.0.0", "HostPort": "9000"}]}},
        })
        assert record.host_ports() == [9000]

    def test_unbound_port_has_no_host_port(self):
        record = InspectRecord.from_attrs({"Name": "/web", "NetworkSettings": {"Ports": {"80/tcp": None}}})
        assert record.port_map == {"80/tcp": []}
        assert record.host_ports() == []

    def test_to_instance(self, sample_config):
        instance = InspectRecord.from_attrs(inspect_attrs(sample_config, status="exited")).to_instance(3)
        assert instance.id == 3
        assert instance.name == "web"
        assert instance.status == AppStatus.STOPPED
        assert instance.ports == [8088]
        assert instance.created_at.startswith("2024-05-01")


@pytest.mark.parametrize("value,expected", [
    ("80/tcp", 80),
    ("8080", 8080),
    ("", None),
    (None, None),
    ("http", None),
    ("70000", None),
])
def test_parse_port(value, expected):
    assert parse_port(value) == expected
