"""Network configuration schemas consumed by the docknet layer.

These Pydantic models describe the caller's allocation for a tenant network.
Subnet, gateway and packet tag values are decided upstream; the docknet layer
only turns them into Docker IPAM and driver options.
"""

from enum import Enum

from pydantic import BaseModel, Field


class PktTagType(str, Enum):
    """Encapsulation used for a tenant network."""
    VLAN = "vlan"
    VXLAN = "vxlan"


class NetworkConfig(BaseModel):
    """Configured state of a tenant network."""
    tenant: str
    network_name: str
    pkt_tag_type: PktTagType = PktTagType.VLAN
    pkt_tag: int = 0
    ext_pkt_tag: int = 0  # VXLAN VNI
    subnet_ip: str
    subnet_len: int = Field(ge=0, le=32)
    gateway: str = ""
    ipv6_subnet: str = ""
    ipv6_subnet_len: int = Field(default=0, ge=0, le=128)
    ipv6_gateway: str = ""

    @property
    def subnet_cidr(self) -> str:
        return f"{self.subnet_ip}/{self.subnet_len}"

    @property
    def ipv6_subnet_cidr(self) -> str:
        """IPv6 CIDR, or an empty string when no IPv6 subnet is configured."""
        if not self.ipv6_subnet:
            return ""
        return f"{self.ipv6_subnet}/{self.ipv6_subnet_len}"

    @property
    def driver_pkt_tag(self) -> int:
        """Packet tag handed to the network driver for this encapsulation."""
        if self.pkt_tag_type == PktTagType.VXLAN:
            return self.ext_pkt_tag
        return self.pkt_tag
