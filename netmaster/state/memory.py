"""In-process state driver.

Keeps serialized records in a dict so round trips behave like a remote store.
Used for single-process deployments and unit tests.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from threading import Event, Lock

from pydantic import BaseModel, ValidationError

from netmaster.errors import StateNotFoundError
from netmaster.state.base import StateDriver, T, WatchState, decode_state, encode_state

logger = logging.getLogger(__name__)


@dataclass
class _Watcher:
    prefix: str
    model: type[BaseModel]
    rsps: queue.Queue


class MemoryStateDriver(StateDriver):
    """Thread-safe dict-backed state store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = Lock()
        self._watchers: list[_Watcher] = []
        self._closed = Event()

    def write_state(self, key: str, value: BaseModel) -> None:
        raw = encode_state(value)
        with self._lock:
            prev = self._data.get(key)
            self._data[key] = raw
            self._notify(key, raw, prev)

    def read_state(self, key: str, model: type[T]) -> T:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            raise StateNotFoundError(key)
        return decode_state(model, raw)

    def read_all_state(self, prefix: str, model: type[T]) -> list[T]:
        with self._lock:
            values = [raw for key, raw in self._data.items() if key.startswith(prefix)]
        return [decode_state(model, raw) for raw in values]

    def watch_all_state(
        self,
        prefix: str,
        model: type[T],
        rsps: queue.Queue[WatchState[T]],
        stop_event: Event | None = None,
    ) -> None:
        watcher = _Watcher(prefix=prefix, model=model, rsps=rsps)
        with self._lock:
            self._watchers.append(watcher)
        logger.debug(f"Watching state under {prefix}")

        try:
            while not self._closed.is_set():
                if stop_event is not None and stop_event.is_set():
                    break
                self._closed.wait(0.05)
        finally:
            with self._lock:
                self._watchers.remove(watcher)
            logger.debug(f"Stopped watching state under {prefix}")

    def clear_state(self, key: str) -> None:
        with self._lock:
            prev = self._data.pop(key, None)
            if prev is not None:
                self._notify(key, None, prev)

    def close(self) -> None:
        self._closed.set()

    def _notify(self, key: str, curr: str | None, prev: str | None) -> None:
        # Called with self._lock held, so puts must never block
        for watcher in self._watchers:
            if not key.startswith(watcher.prefix):
                continue
            try:
                event = WatchState(
                    curr=decode_state(watcher.model, curr) if curr is not None else None,
                    prev=decode_state(watcher.model, prev) if prev is not None else None,
                )
            except ValidationError as e:
                logger.warning(f"Skipping undecodable state change for {key}: {e}")
                continue
            try:
                watcher.rsps.put_nowait(event)
            except queue.Full:
                logger.warning(f"Watch queue for {watcher.prefix} is full, dropping change for {key}")
