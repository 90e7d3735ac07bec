"""State store drivers for operational state."""

from netmaster.state.base import StateDriver, WatchState
from netmaster.state.memory import MemoryStateDriver
from netmaster.state.redis_driver import RedisStateDriver
from netmaster.state.registry import get_state_driver, reset_state_driver

__all__ = [
    "MemoryStateDriver",
    "RedisStateDriver",
    "StateDriver",
    "WatchState",
    "get_state_driver",
    "reset_state_driver",
]
