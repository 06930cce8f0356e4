"""Logging setup for the reqsnap packages.

Both the engine and the CLI log through module-level loggers under the
``reqsnap_engine`` and ``reqsnap_cli`` namespaces.  :func:`configure_logging`
attaches one stderr handler to each namespace, either with a plain text
format or with :class:`JSONFormatter` for log aggregators.

JSON output schema per line::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "DEBUG",
        "logger": "reqsnap_engine.fetch.http_fetcher",
        "message": "GET https://api.example.com/users -> 200",
        "exc_info": "Traceback ..."  // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

_TEXT_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_LOGGER_NAMESPACES = ("reqsnap_engine", "reqsnap_cli")


class ReqsnapStreamHandler(logging.StreamHandler):
    """The stderr handler installed by :func:`configure_logging`."""


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(*, verbose: bool = False, structured: bool = False) -> None:
    """Install a stderr handler on the reqsnap loggers.

    Calling this more than once replaces the previously installed handler,
    so repeated CLI invocations in one process (tests) do not stack
    handlers.
    """
    handler = ReqsnapStreamHandler()
    handler.setFormatter(JSONFormatter() if structured else logging.Formatter(_TEXT_FORMAT))

    level = logging.DEBUG if verbose else logging.WARNING
    for name in _LOGGER_NAMESPACES:
        pkg_logger = logging.getLogger(name)
        for existing in list(pkg_logger.handlers):
            if isinstance(existing, ReqsnapStreamHandler):
                pkg_logger.removeHandler(existing)
        pkg_logger.addHandler(handler)
        pkg_logger.setLevel(level)
