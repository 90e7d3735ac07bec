"""State driver abstraction for operational state records."""

from __future__ import annotations

import queue
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import Event
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class WatchState(Generic[T]):
    """A state transition observed under a watched prefix.

    ``curr`` is None when the key was cleared, ``prev`` is None when the key
    was created.
    """

    curr: T | None
    prev: T | None


def encode_state(value: BaseModel) -> str:
    return value.model_dump_json(by_alias=True)


def decode_state(model: type[T], raw: str | bytes) -> T:
    return model.model_validate_json(raw)


class StateDriver(ABC):
    """Abstract key-value state store.

    Keys are namespaced paths (e.g. ``/contiv.io/oper/docknet/<id>``). Every
    read call names the record model it expects, so callers always get back
    the concrete type they asked for.
    """

    @abstractmethod
    def write_state(self, key: str, value: BaseModel) -> None:
        """Store ``value`` under ``key``, replacing any existing entry."""

    @abstractmethod
    def read_state(self, key: str, model: type[T]) -> T:
        """Load the record at ``key``.

        Raises StateNotFoundError if nothing is stored there.
        """

    @abstractmethod
    def read_all_state(self, prefix: str, model: type[T]) -> list[T]:
        """Return every record stored under ``prefix`` (unordered)."""

    @abstractmethod
    def watch_all_state(
        self,
        prefix: str,
        model: type[T],
        rsps: queue.Queue[WatchState[T]],
        stop_event: Event | None = None,
    ) -> None:
        """Push state transitions under ``prefix`` into ``rsps``.

        Blocks until ``stop_event`` is set or the store connection ends.
        """

    @abstractmethod
    def clear_state(self, key: str) -> None:
        """Delete the record at ``key``. Missing keys are ignored."""

    def close(self) -> None:
        """Release the store connection and end running watches."""
