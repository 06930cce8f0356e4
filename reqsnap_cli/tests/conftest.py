"""Shared fixtures for CLI tests.

Every test runs in its own working directory with the ``REQSNAP_*``
environment cleared, so a developer's ``.env`` or snapshot directory never
leaks into assertions.  The stderr handlers installed by the CLI callback
are removed afterwards because they hold the runner's captured stream.
"""

from __future__ import annotations

import logging
import os

import pytest

from reqsnap_engine.logging_config import ReqsnapStreamHandler


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch, tmp_path):
    for name in list(os.environ):
        if name.startswith("REQSNAP_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
    for name in ("reqsnap_engine", "reqsnap_cli"):
        pkg_logger = logging.getLogger(name)
        for handler in list(pkg_logger.handlers):
            if isinstance(handler, ReqsnapStreamHandler):
                pkg_logger.removeHandler(handler)
        pkg_logger.setLevel(logging.NOTSET)
