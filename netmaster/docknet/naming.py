"""Docker network naming for tenant networks.

All components that build or interpret docknet names MUST use these functions
so names stay consistent between the creator and the network plugin.

Encoding (current):   {service}{epg|network}[.{tenant}]
Accepted on parse:    {service}__{network}[.{tenant}]
                      [{service}.]{network}/{tenant}     (legacy)

The default tenant is never written into a name.

Note that ``get_docknet_name`` joins service and network with no separator,
so a name built with a service does not parse back to that service:
``get_docknet_name("acme", "db", "", "api") == "apidb.acme"`` parses as
network ``apidb`` in tenant ``acme``. Existing networks carry such names, so
the encoding is left as is.
"""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple

from netmaster.errors import NameFormatError

logger = logging.getLogger(__name__)

DEFAULT_TENANT = "default"

TENANT_SEPARATOR = "."
SERVICE_SEPARATOR = "__"
LEGACY_TENANT_SEPARATOR = "/"
LEGACY_SERVICE_SEPARATOR = "."


class DocknetName(NamedTuple):
    """Logical names recovered from a docknet name."""

    tenant: str
    network: str
    service: str


def get_docknet_name(tenant: str, network: str, epg: str = "", service: str = "") -> str:
    """Build the Docker network name for a tenant network.

    The endpoint group, when given, replaces the network name.
    """
    name = epg or network

    if tenant != DEFAULT_TENANT:
        name = f"{name}{TENANT_SEPARATOR}{tenant}"

    if service:
        name = f"{service}{name}"
    return name


def _split_service(value: str, separator: str) -> tuple[str, str]:
    """Split ``service<sep>network``; returns (service, network)."""
    parts = value.split(separator)
    if len(parts) == 2:
        return parts[0], parts[1]
    return "", parts[0]


def _parse_legacy_format(name: str) -> DocknetName | None:
    """Parse ``[service.]network/tenant``."""
    if LEGACY_TENANT_SEPARATOR not in name:
        return None

    parts = name.split(LEGACY_TENANT_SEPARATOR)
    if len(parts) != 2:
        raise NameFormatError(name)

    service, network = _split_service(parts[0], LEGACY_SERVICE_SEPARATOR)
    return DocknetName(tenant=parts[1], network=network, service=service)


def _parse_current_format(name: str) -> DocknetName | None:
    """Parse ``[service__]network[.tenant]``."""
    parts = name.split(TENANT_SEPARATOR)
    if len(parts) == 2:
        base, tenant = parts
    elif len(parts) == 1:
        base, tenant = parts[0], DEFAULT_TENANT
    else:
        raise NameFormatError(name)

    service, network = _split_service(base, SERVICE_SEPARATOR)
    return DocknetName(tenant=tenant, network=network, service=service)


# Tried in order; a parser returns None when the name is not in its format.
_NAME_PARSERS: tuple[Callable[[str], DocknetName | None], ...] = (
    _parse_legacy_format,
    _parse_current_format,
)


def parse_docknet_name(name: str) -> DocknetName:
    """Recover (tenant, network, service) from a Docker network name.

    Raises:
        NameFormatError: name is empty or matches no known format
    """
    logger.debug(f"Parsing docknet name: {name}")
    if not name:
        logger.error(f"Invalid network name format for network '{name}'")
        raise NameFormatError(name)

    for parser in _NAME_PARSERS:
        try:
            parsed = parser(name)
        except NameFormatError:
            logger.error(f"Invalid network name format for network {name}")
            raise
        if parsed is not None:
            return parsed

    logger.error(f"Invalid network name format for network {name}")
    raise NameFormatError(name)
