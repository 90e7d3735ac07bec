from __future__ import annotations

import itertools

import pytest
from docker.errors import NotFound

from netmaster.config import settings
from netmaster.schemas import NetworkConfig, PktTagType
from netmaster.state import MemoryStateDriver, reset_state_driver


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Keep unit tests off real Redis and the real oper path."""
    monkeypatch.setattr(settings, "state_store_url", "memory://")
    monkeypatch.setattr(settings, "state_oper_path", "/test/oper/")
    reset_state_driver()
    yield
    reset_state_driver()


class FakeNetwork:
    def __init__(self, network_id: str, name: str, driver: str):
        self.id = network_id
        self.name = name
        self.attrs = {"Id": network_id, "Name": name, "Driver": driver}


class FakeDocker:
    """Minimal stand-in for docker.DockerClient network calls."""

    def __init__(self):
        self.by_name: dict[str, FakeNetwork] = {}
        self.create_calls: list[dict] = []
        self.remove_calls: list[str] = []
        self.inspect_error: Exception | None = None
        self.create_error: Exception | None = None
        self.remove_error: Exception | None = None
        self._ids = itertools.count(1)
        self.networks = self._Networks(self)
        self.api = self._API(self)

    def add_network(self, name: str, driver: str) -> FakeNetwork:
        network = FakeNetwork(f"nw-{next(self._ids):04d}", name, driver)
        self.by_name[name] = network
        return network

    class _Networks:
        def __init__(self, client: "FakeDocker"):
            self._client = client

        def get(self, name: str) -> FakeNetwork:
            if self._client.inspect_error is not None:
                raise self._client.inspect_error
            if name not in self._client.by_name:
                raise NotFound(f"network {name} not found")
            return self._client.by_name[name]

        def create(self, name: str, **kwargs) -> FakeNetwork:
            self._client.create_calls.append({"name": name, **kwargs})
            if self._client.create_error is not None:
                raise self._client.create_error
            return self._client.add_network(name, kwargs.get("driver"))

    class _API:
        def __init__(self, client: "FakeDocker"):
            self._client = client

        def remove_network(self, net_id: str) -> None:
            self._client.remove_calls.append(net_id)
            if self._client.remove_error is not None:
                raise self._client.remove_error
            if net_id not in self._client.by_name:
                raise NotFound(f"network {net_id} not found")
            del self._client.by_name[net_id]


@pytest.fixture
def fake_docker() -> FakeDocker:
    return FakeDocker()


@pytest.fixture
def state_driver() -> MemoryStateDriver:
    driver = MemoryStateDriver()
    yield driver
    driver.close()


@pytest.fixture
def vlan_config() -> NetworkConfig:
    return NetworkConfig(
        tenant="acme",
        network_name="db",
        pkt_tag_type=PktTagType.VLAN,
        pkt_tag=100,
        ext_pkt_tag=5000,
        subnet_ip="10.1.1.0",
        subnet_len=24,
        gateway="10.1.1.254",
    )
