"""Docker network lifecycle for tenant networks.

Each tenant network (optionally scoped to a service) is backed by one Docker
network created through the netplugin network and IPAM drivers. The mapping
from the tenant network to the Docker network id is kept as docknet oper state
so that plugin callbacks, which only see the Docker network id, can find the
tenant network again.

There is no rollback: if the Docker network is created but the oper state
cannot be written, the network is left in Docker. If removing the Docker
network fails, the oper state is kept. Callers reconcile both cases.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

import docker
from docker.errors import DockerException, NotFound
from docker.types import IPAMConfig, IPAMPool

from netmaster.config import settings
from netmaster.docknet.naming import get_docknet_name
from netmaster.docknet.oper_state import DocknetOperState, DocknetOperStore, docknet_oper_id
from netmaster.errors import DocknetNotFoundError, NetworkCollisionError, RuntimeUnavailableError
from netmaster.metrics import docker_api_duration, docknet_operations
from netmaster.schemas import NetworkConfig
from netmaster.state.base import StateDriver
from netmaster.state.registry import get_state_driver

logger = logging.getLogger(__name__)


@contextmanager
def _docker_call(operation: str) -> Iterator[None]:
    start = time.monotonic()
    status = "error"
    try:
        yield
        status = "success"
    finally:
        docker_api_duration.labels(operation=operation, status=status).observe(
            time.monotonic() - start
        )


class DocknetManager:
    """Creates and removes Docker networks for tenant networks."""

    def __init__(
        self,
        docker_client: docker.DockerClient,
        state_driver: StateDriver,
        *,
        net_driver_name: str | None = None,
        ipam_driver_name: str | None = None,
        oper_path: str | None = None,
    ):
        self.docker = docker_client
        self.oper_store = DocknetOperStore(state_driver, oper_path=oper_path)
        self._net_driver_name = net_driver_name or settings.net_driver_name
        self._ipam_driver_name = ipam_driver_name or settings.ipam_driver_name

    @property
    def net_driver_name(self) -> str:
        return self._net_driver_name

    @property
    def ipam_driver_name(self) -> str:
        return self._ipam_driver_name

    @classmethod
    def from_settings(cls) -> "DocknetManager":
        """Build a manager connected to the configured Docker daemon and state store."""
        try:
            client = docker.DockerClient(base_url=settings.docker_socket)
        except DockerException as e:
            logger.error(f"Unable to connect to docker. Error {e}")
            raise RuntimeUnavailableError("Unable to connect to docker") from e
        return cls(client, get_state_driver())

    def create_docknet(
        self,
        tenant_name: str,
        network_name: str,
        service_name: str,
        nw_cfg: NetworkConfig,
    ) -> DocknetOperState:
        """Create (or adopt) the Docker network for a tenant network.

        Returns the oper state written for it.

        Raises:
            NetworkCollisionError: the name is taken by a network of another driver
            docker.errors.APIError: Docker rejected the request
        """
        docknet_name = get_docknet_name(tenant_name, network_name, "", service_name)

        try:
            with _docker_call("inspect_network"):
                existing = self.docker.networks.get(docknet_name)
        except NotFound:
            existing = None

        if existing is not None:
            driver = existing.attrs.get("Driver")
            if driver != self._net_driver_name:
                logger.error(f"Network name {docknet_name} used by another driver {driver}")
                docknet_operations.labels(operation="create", result="collision").inc()
                raise NetworkCollisionError(docknet_name, driver)
            logger.info(f"docker network: {docknet_name} already exists")
            nw_id = existing.id
        else:
            nw_id = self._create_network(docknet_name, nw_cfg)

        dnet_oper = DocknetOperState(
            id=docknet_oper_id(tenant_name, network_name, service_name),
            tenant_name=tenant_name,
            network_name=network_name,
            service_name=service_name,
            docknet_uuid=nw_id,
        )
        self.oper_store.write(dnet_oper)
        docknet_operations.labels(operation="create", result="success").inc()
        return dnet_oper

    def delete_docknet(self, tenant_name: str, network_name: str, service_name: str) -> None:
        """Remove the Docker network for a tenant network and clear its oper state."""
        docknet_name = get_docknet_name(tenant_name, network_name, "", service_name)
        logger.info(f"Deleting docker network: {docknet_name}")

        try:
            with _docker_call("remove_network"):
                self.docker.api.remove_network(docknet_name)
        except DockerException as e:
            logger.error(f"Error deleting network {docknet_name}. Err: {e}")
            docknet_operations.labels(operation="delete", result="error").inc()
            raise

        self.oper_store.clear(docknet_oper_id(tenant_name, network_name, service_name))
        docknet_operations.labels(operation="delete", result="success").inc()

    def find_docknet_by_uuid(self, docknet_uuid: str) -> DocknetOperState:
        """Find the docknet oper state for a Docker network id.

        Walks every docknet record; the number of records is the number of
        live tenant networks.
        """
        for dnet in self.oper_store.read_all():
            if dnet.docknet_uuid == docknet_uuid:
                return dnet

        docknet_operations.labels(operation="lookup", result="not_found").inc()
        raise DocknetNotFoundError(docknet_uuid)

    def get_docknet(self, tenant_name: str, network_name: str, service_name: str = "") -> DocknetOperState:
        """Read the oper state of a tenant network.

        Raises StateNotFoundError if no docknet was created for it.
        """
        return self.oper_store.read(docknet_oper_id(tenant_name, network_name, service_name))

    def _create_network(self, docknet_name: str, nw_cfg: NetworkConfig) -> str:
        # plugin options to be sent to docker
        plugin_options = {
            "tenant": nw_cfg.tenant,
            "encap": nw_cfg.pkt_tag_type.value,
            "pkt-tag": str(nw_cfg.driver_pkt_tag),
        }

        pools = [IPAMPool(subnet=nw_cfg.subnet_cidr, gateway=nw_cfg.gateway)]
        subnet_cidr_v6 = nw_cfg.ipv6_subnet_cidr
        if subnet_cidr_v6:
            pools.append(IPAMPool(subnet=subnet_cidr_v6, gateway=nw_cfg.ipv6_gateway))

        ipam = IPAMConfig(
            driver=self._ipam_driver_name,
            pool_configs=pools,
            options={
                "tenant": nw_cfg.tenant,
                "network": nw_cfg.network_name,
            },
        )

        logger.info(
            f"Creating docker network: {docknet_name} driver={self._net_driver_name} "
            f"options={plugin_options} ipam={dict(ipam)}"
        )

        try:
            with _docker_call("create_network"):
                network = self.docker.networks.create(
                    docknet_name,
                    driver=self._net_driver_name,
                    options=plugin_options,
                    ipam=ipam,
                    check_duplicate=True,
                    enable_ipv6=bool(subnet_cidr_v6),
                )
        except DockerException as e:
            logger.error(f"Error creating network {docknet_name}. Err: {e}")
            docknet_operations.labels(operation="create", result="error").inc()
            raise

        return network.id
