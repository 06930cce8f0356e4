"""Tests for reqsnap_engine.logging_config."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from reqsnap_engine.logging_config import JSONFormatter, ReqsnapStreamHandler, configure_logging


def _record(msg: str = "hello %s", args: tuple = ("world",), exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="reqsnap_engine.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


@pytest.fixture
def restore_loggers():
    saved = {}
    for name in ("reqsnap_engine", "reqsnap_cli"):
        lg = logging.getLogger(name)
        saved[name] = (list(lg.handlers), lg.level)
    yield
    for name, (handlers, level) in saved.items():
        lg = logging.getLogger(name)
        lg.handlers = handlers
        lg.setLevel(level)


class TestJSONFormatter:
    def test_basic_fields(self):
        line = JSONFormatter().format(_record())
        payload = json.loads(line)
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "reqsnap_engine.test"
        assert payload["message"] == "hello world"
        assert "timestamp" in payload
        assert "exc_info" not in payload

    def test_single_line(self):
        assert "\n" not in JSONFormatter().format(_record(msg="multi\nline", args=()))

    def test_exc_info(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]


class TestConfigureLogging:
    def test_default_level_is_warning(self, restore_loggers):
        configure_logging()
        assert logging.getLogger("reqsnap_engine").level == logging.WARNING
        assert logging.getLogger("reqsnap_cli").level == logging.WARNING

    def test_verbose_level_is_debug(self, restore_loggers):
        configure_logging(verbose=True)
        assert logging.getLogger("reqsnap_engine").level == logging.DEBUG

    def test_structured_uses_json_formatter(self, restore_loggers):
        configure_logging(structured=True)
        handlers = [h for h in logging.getLogger("reqsnap_engine").handlers if isinstance(h, ReqsnapStreamHandler)]
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)

    def test_repeated_calls_do_not_stack_handlers(self, restore_loggers):
        configure_logging()
        configure_logging()
        configure_logging(verbose=True)
        handlers = [h for h in logging.getLogger("reqsnap_cli").handlers if isinstance(h, ReqsnapStreamHandler)]
        assert len(handlers) == 1

    def test_foreign_handlers_are_kept(self, restore_loggers):
        foreign = logging.StreamHandler()
        logging.getLogger("reqsnap_engine").addHandler(foreign)
        configure_logging()
        configure_logging()
        handlers = logging.getLogger("reqsnap_engine").handlers
        assert foreign in handlers
        assert sum(isinstance(h, ReqsnapStreamHandler) for h in handlers) == 1
