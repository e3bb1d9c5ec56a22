"""Shared fixtures for the confloader test suite."""

from __future__ import annotations

import io
import logging
import socket

import pytest
import structlog

from confloader.core import pipeline
from confloader.core.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def _block_network_for_offline(request, monkeypatch):
    """Block outbound connections in tests marked as offline."""
    if "offline" in [m.name for m in request.node.iter_markers()]:

        def _blocked(*_args, **_kwargs):
            raise RuntimeError("Offline test attempted to open a network connection")

        monkeypatch.setattr(socket, "create_connection", _blocked)


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch):
    """Undo process-wide output format and logging configuration between tests."""
    monkeypatch.setattr(pipeline, "_default_output_format", None)
    monkeypatch.delenv("CONFLOADER_OUTPUT_FORMAT", raising=False)
    yield
    structlog.reset_defaults()
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def pytest_configure(config):
    config.addinivalue_line("markers", "offline: mark test as offline (no network)")


@pytest.fixture()
def sink() -> io.StringIO:
    return io.StringIO()
