"""Operational state of docker networks created for tenant networks."""

from __future__ import annotations

import logging
import queue
from threading import Event

from pydantic import BaseModel, ConfigDict, Field

from netmaster.config import settings
from netmaster.state.base import StateDriver, WatchState

logger = logging.getLogger(__name__)

DOCKNET_OPER_SUBPATH = "docknet/"


def docknet_oper_id(tenant: str, network: str, service: str) -> str:
    """Composite key of a docknet record: ``tenant.network.service``."""
    return f"{tenant}.{network}.{service}"


class DocknetOperState(BaseModel):
    """Oper state of a docker network bound to a tenant network."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    tenant_name: str = Field(alias="tenantName")
    network_name: str = Field(alias="networkName")
    service_name: str = Field(default="", alias="serviceName")
    docknet_uuid: str = Field(alias="docknetUUID")


class DocknetOperStore:
    """Reads and writes docknet oper state through a state driver.

    Records live under ``<oper_path>docknet/<id>``. Writes replace the whole
    record.
    """

    def __init__(self, state_driver: StateDriver, oper_path: str | None = None):
        self.state_driver = state_driver
        self.prefix = f"{oper_path or settings.state_oper_path}{DOCKNET_OPER_SUBPATH}"

    def key(self, oper_id: str) -> str:
        return f"{self.prefix}{oper_id}"

    def write(self, oper: DocknetOperState) -> None:
        self.state_driver.write_state(self.key(oper.id), oper)
        logger.debug(f"Wrote docknet oper state {oper.id}")

    def read(self, oper_id: str) -> DocknetOperState:
        return self.state_driver.read_state(self.key(oper_id), DocknetOperState)

    def read_all(self) -> list[DocknetOperState]:
        return self.state_driver.read_all_state(self.prefix, DocknetOperState)

    def watch_all(
        self,
        rsps: queue.Queue[WatchState[DocknetOperState]],
        stop_event: Event | None = None,
    ) -> None:
        """Stream docknet state transitions into ``rsps``.

        Blocks the calling thread; run it in a dedicated thread.
        """
        self.state_driver.watch_all_state(self.prefix, DocknetOperState, rsps, stop_event)

    def clear(self, oper_id: str) -> None:
        self.state_driver.clear_state(self.key(oper_id))
        logger.debug(f"Cleared docknet oper state {oper_id}")
