"""Unit tests for structlog configuration."""

import io
import logging

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def _renderer():
    return structlog.get_config()["processors"][-1]


def test_json_output_without_tty(monkeypatch):
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setattr("sys.stdout", io.StringIO())

    configure_logging()

    assert isinstance(_renderer(), structlog.processors.JSONRenderer)


def test_force_color_uses_console_renderer(monkeypatch):
    monkeypatch.setenv("FORCE_COLOR", "1")

    configure_logging()

    assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)


@pytest.mark.parametrize(
    ("debug", "level"), [(False, logging.INFO), (True, logging.DEBUG)]
)
def test_debug_controls_level(monkeypatch, debug, level):
    monkeypatch.setenv("FORCE_COLOR", "1")

    configure_logging(debug=debug)

    wrapper = structlog.get_config()["wrapper_class"]
    assert wrapper is structlog.make_filtering_bound_logger(level)


def test_events_carry_service_name(monkeypatch):
    monkeypatch.setenv("FORCE_COLOR", "1")

    configure_logging()

    processors = structlog.get_config()["processors"]
    add_service = processors[1]
    assert add_service(None, "info", {"event": "x"})["service"] == "tenant-api"
