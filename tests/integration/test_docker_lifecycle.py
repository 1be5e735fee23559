"""
Lifecycle tests against a real Docker daemon.

Skipped when Docker is not reachable. Both runtime backends are exercised.
"""

import socket
import uuid

import docker
import pytest
from fastapi.testclient import TestClient

from lightshuttle.api.app import create_app
from lightshuttle.auth.namespace import EMPTY_KEY_STORE
from lightshuttle.config import Settings
from lightshuttle.core.models import ContainerConfig
from lightshuttle.core.recreate import Recreator, extract_config
from lightshuttle.core.runtime import create_runtime_client

pytestmark = [pytest.mark.integration, pytest.mark.requires_docker]

IMAGE = "nginx:alpine"
TEST_LABEL = "lightshuttle.test"


def _docker_or_skip():
    """Return a docker client or skip tests if Docker is unavailable."""
    try:
        client = docker.from_env()
        client.ping()
        return client
    except Exception as e:
        pytest.skip(f"Docker not available: {e}")


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(scope="module")
def dclient():
    client = _docker_or_skip()
    try:
        client.images.pull(IMAGE)
    except docker.errors.APIError as e:
        pytest.skip(f"Could not pull {IMAGE}: {e}")
    return client


@pytest.fixture(autouse=True)
def cleanup_test_containers(dclient):
    """Before & after each test, remove every container carrying the test label."""

    def _prune():
        for c in dclient.containers.list(all=True, filters={"label": TEST_LABEL}):
            try:
                c.remove(force=True)
            except docker.errors.APIError:
                pass

    _prune()
    yield
    _prune()


@pytest.fixture(params=["cli", "docker"])
def runtime(request):
    return create_runtime_client(request.param)


@pytest.fixture
def config(tmp_path):
    (tmp_path / "marker.txt").write_text("kept across recreate\n")
    return ContainerConfig(
        name=f"ls-test-{uuid.uuid4().hex[:8]}",
        image=IMAGE,
        host_ports=[_free_port()],
        container_port=80,
        labels={TEST_LABEL: "1"},
        env={"K": "V"},
        volumes=[f"{tmp_path}:/data"],
        restart_policy="unless-stopped",
    )


def test_run_inspect_round_trip(runtime, config):
    runtime.run(config)
    record = runtime.inspect(config.name)
    extracted = extract_config(config.name, record)

    assert extracted.image == config.image
    assert extracted.host_ports == config.host_ports
    assert extracted.container_port == 80
    assert extracted.env["K"] == "V"
    assert extracted.labels[TEST_LABEL] == "1"
    assert extracted.volumes == config.volumes
    assert extracted.restart_policy == "unless-stopped"


def test_stop_start_remove(runtime, config):
    runtime.run(config)
    runtime.stop(config.name)
    assert runtime.status(config.name) == "exited"
    assert config.name in [app.name for app in runtime.list()]

    runtime.start(config.name)
    assert runtime.status(config.name) == "running"

    runtime.remove(config.name)
    assert config.name not in [app.name for app in runtime.list()]


def test_recreate_keeps_mounted_content(runtime, config, dclient):
    old_id = runtime.run(config)
    new_id = Recreator(runtime).recreate(config.name)
    assert new_id != old_id

    container = dclient.containers.get(config.name)
    exit_code, output = container.exec_run(["cat", "/data/marker.txt"])
    assert exit_code == 0
    assert output.decode() == "kept across recreate\n"
    assert extract_config(config.name, runtime.inspect(config.name)).host_ports == config.host_ports


def test_api_lifecycle(config):
    app = create_app(Settings(), key_store=EMPTY_KEY_STORE)
    client = TestClient(app)

    response = client.post("/api/v1/apps", json={
        "name": config.name,
        "image": config.image,
        "ports": config.host_ports,
        "container_port": 80,
        "labels": config.labels,
        "volumes": config.volumes,
    })
    assert response.status_code == 201, response.text

    response = client.get(f"/api/v1/apps/{config.name}")
    assert response.status_code == 200
    assert response.json()["status"] == "running"

    assert client.post(f"/api/v1/apps/{config.name}/recreate").status_code == 200
    assert client.delete(f"/api/v1/apps/{config.name}").status_code == 204
    assert client.get(f"/api/v1/apps/{config.name}").status_code == 404
