"""Docker networks ("docknets") backing tenant networks."""

from netmaster.docknet.manager import DocknetManager
from netmaster.docknet.naming import DEFAULT_TENANT, DocknetName, get_docknet_name, parse_docknet_name
from netmaster.docknet.oper_state import DocknetOperState, DocknetOperStore, docknet_oper_id

__all__ = [
    "DEFAULT_TENANT",
    "DocknetManager",
    "DocknetName",
    "DocknetOperState",
    "DocknetOperStore",
    "docknet_oper_id",
    "get_docknet_name",
    "parse_docknet_name",
]
