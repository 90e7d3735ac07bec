"""Redis-backed state driver.

Records are stored as JSON strings under their full key. Every write or clear
also publishes a change message on ``<watch_prefix><key>`` so watchers can
pattern-subscribe to a whole namespace:

    {"key": "...", "curr": "<json>|null", "prev": "<json>|null"}
"""
from __future__ import annotations

import json
import logging
import queue
import re
from threading import Event

import redis
from pydantic import BaseModel, ValidationError

from netmaster.config import settings
from netmaster.errors import StateNotFoundError
from netmaster.state.base import StateDriver, T, WatchState, decode_state, encode_state

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _glob_escape(value: str) -> str:
    """Escape Redis glob metacharacters in a literal key prefix."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


def _as_text(value: str | bytes | None) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisStateDriver(StateDriver):
    """State store backed by a shared Redis instance."""

    def __init__(
        self,
        client: redis.Redis,
        *,
        watch_prefix: str | None = None,
        poll_interval: float | None = None,
    ):
        self._redis = client
        self._watch_prefix = watch_prefix if watch_prefix is not None else settings.state_watch_prefix
        self._poll_interval = poll_interval if poll_interval is not None else settings.watch_poll_interval
        self._closed = Event()

    @classmethod
    def from_url(cls, url: str) -> "RedisStateDriver":
        return cls(redis.from_url(url))

    def write_state(self, key: str, value: BaseModel) -> None:
        raw = encode_state(value)
        pipe = self._redis.pipeline()
        pipe.get(key)
        pipe.set(key, raw)
        prev, _ = pipe.execute()
        self._publish(key, raw, _as_text(prev))

    def read_state(self, key: str, model: type[T]) -> T:
        raw = self._redis.get(key)
        if raw is None:
            raise StateNotFoundError(key)
        return decode_state(model, raw)

    def read_all_state(self, prefix: str, model: type[T]) -> list[T]:
        keys = list(self._redis.scan_iter(match=f"{_glob_escape(prefix)}*"))
        if not keys:
            return []
        # Keys cleared between SCAN and MGET come back as None
        return [decode_state(model, raw) for raw in self._redis.mget(keys) if raw is not None]

    def watch_all_state(
        self,
        prefix: str,
        model: type[T],
        rsps: queue.Queue[WatchState[T]],
        stop_event: Event | None = None,
    ) -> None:
        pattern = f"{_glob_escape(self._watch_prefix + prefix)}*"
        pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        pubsub.psubscribe(pattern)
        logger.debug(f"Watching state under {prefix} via {pattern}")

        try:
            while not self._stopped(stop_event):
                message = pubsub.get_message(timeout=self._poll_interval)
                if message is None or message.get("type") != "pmessage":
                    continue
                try:
                    event = self._decode_event(model, message["data"])
                except (ValueError, ValidationError) as e:
                    logger.warning(f"Skipping undecodable state change under {prefix}: {e}")
                    continue
                self._deliver(rsps, event, stop_event)
        except redis.ConnectionError as e:
            logger.warning(f"State watch on {prefix} ended: {e}")
            raise
        finally:
            pubsub.close()

    def clear_state(self, key: str) -> None:
        pipe = self._redis.pipeline()
        pipe.get(key)
        pipe.delete(key)
        prev, _ = pipe.execute()
        if prev is not None:
            self._publish(key, None, _as_text(prev))

    def close(self) -> None:
        self._closed.set()
        self._redis.close()

    def _stopped(self, stop_event: Event | None) -> bool:
        return self._closed.is_set() or (stop_event is not None and stop_event.is_set())

    def _deliver(self, rsps: queue.Queue, event: WatchState, stop_event: Event | None) -> None:
        # Wait for a slow consumer, but keep honouring stop_event and close()
        while not self._stopped(stop_event):
            try:
                rsps.put(event, timeout=self._poll_interval)
                return
            except queue.Full:
                continue

    def _publish(self, key: str, curr: str | None, prev: str | None) -> None:
        payload = json.dumps({"key": key, "curr": curr, "prev": prev})
        self._redis.publish(f"{self._watch_prefix}{key}", payload)

    def _decode_event(self, model: type[T], data: str | bytes) -> WatchState[T]:
        event = json.loads(_as_text(data))
        curr = event.get("curr")
        prev = event.get("prev")
        return WatchState(
            curr=decode_state(model, curr) if curr is not None else None,
            prev=decode_state(model, prev) if prev is not None else None,
        )
