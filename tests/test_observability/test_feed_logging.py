"""Tests for structlog configuration."""

import logging
from unittest.mock import patch

import pytest
import structlog

from src.config.settings import Settings
from src.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def _configure(**overrides) -> list:
    with patch("src.observability.logging.get_settings", return_value=Settings(**overrides)):
        setup_logging()
    return structlog.get_config()["processors"]


class TestSetupLogging:
    def test_production_renders_json(self):
        processors = _configure(environment="production")

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_renders_console(self):
        processors = _configure(environment="development")

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert not any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)

    def test_quiets_http_loggers(self):
        _configure(log_level="DEBUG")

        for name in ("httpx", "httpcore", "asyncio"):
            assert logging.getLogger(name).level == logging.WARNING
