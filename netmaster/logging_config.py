"""Structured logging setup for netmaster processes."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from netmaster.config import settings

# LogRecord attributes that are not user supplied extras
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


def _record_extras(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class NetmasterJSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def __init__(self, component: str = "netmaster"):
        super().__init__()
        self.component = component

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": "netmaster",
            "component": self.component,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = _record_extras(record)
        if extras:
            entry["extra"] = extras
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class NetmasterTextFormatter(logging.Formatter):
    """Human readable formatter used for interactive runs."""

    def __init__(self, component: str = "netmaster"):
        super().__init__(
            fmt=f"%(asctime)s | %(levelname)-8s | {component} | %(name)s | %(message)s",
        )


def setup_logging(component: str = "netmaster") -> None:
    """Configure the root logger from settings.

    Replaces any previously installed handlers so repeated calls do not
    duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format.lower() == "json":
        handler.setFormatter(NetmasterJSONFormatter(component=component))
    else:
        handler.setFormatter(NetmasterTextFormatter(component=component))

    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    # docker and urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)
