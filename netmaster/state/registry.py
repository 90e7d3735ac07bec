"""State driver selection from settings."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from netmaster.config import settings
from netmaster.state.base import StateDriver
from netmaster.state.memory import MemoryStateDriver
from netmaster.state.redis_driver import RedisStateDriver

logger = logging.getLogger(__name__)

_REDIS_SCHEMES = {"redis", "rediss", "unix"}

_state_driver: StateDriver | None = None


def _build_state_driver(url: str) -> StateDriver:
    scheme = urlparse(url).scheme.lower()
    if scheme == "memory":
        logger.info("Using in-process state store")
        return MemoryStateDriver()
    if scheme in _REDIS_SCHEMES:
        logger.info(f"Using redis state store at {url}")
        return RedisStateDriver.from_url(url)
    raise ValueError(f"Unsupported state store URL '{url}'")


def get_state_driver() -> StateDriver:
    """Return the configured state driver singleton."""
    global _state_driver
    if _state_driver is None:
        _state_driver = _build_state_driver(settings.state_store_url)
    return _state_driver


def reset_state_driver() -> None:
    """Close and drop the state driver singleton (mainly for testing)."""
    global _state_driver
    if _state_driver is not None:
        _state_driver.close()
    _state_driver = None
