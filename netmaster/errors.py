"""Exceptions raised by the docknet binding layer.

Failures coming from Docker or the state store backend are not wrapped; they
propagate to the caller as raised by the client library.
"""

from __future__ import annotations


class NetmasterError(Exception):
    """Base exception for docknet binding errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NameFormatError(NetmasterError, ValueError):
    """Docker network name does not match any known encoding."""
    def __init__(self, name: str):
        super().__init__(f"Invalid network name format for network '{name}'")
        self.name = name


class NetworkCollisionError(NetmasterError):
    """Docker network name is already used by another driver."""
    def __init__(self, name: str, driver: str | None):
        super().__init__(f"Network name {name} used by another driver {driver}")
        self.name = name
        self.driver = driver


class StateNotFoundError(NetmasterError):
    """No state stored under the requested key."""
    def __init__(self, key: str):
        super().__init__(f"State not found for key '{key}'")
        self.key = key


class DocknetNotFoundError(NetmasterError):
    """No docknet operational state matches the requested network id."""
    def __init__(self, docknet_uuid: str):
        super().__init__(f"docknet UUID {docknet_uuid} not found")
        self.docknet_uuid = docknet_uuid


class RuntimeUnavailableError(NetmasterError):
    """Docker daemon could not be reached."""
    pass
