"""Tests for logging configuration."""

import logging

from structlog.testing import capture_logs

from finreport.logger import configure_logging, get_logger


def test_configure_logging_level_from_env(monkeypatch):
    monkeypatch.setenv("FINREPORT_LOG_LEVEL", "debug")

    configure_logging()

    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_defaults_to_warning(monkeypatch):
    monkeypatch.delenv("FINREPORT_LOG_LEVEL", raising=False)

    configure_logging()

    assert logging.getLogger().level == logging.WARNING


def test_json_output():
    configure_logging(level="INFO", json_output=True)

    logger = get_logger("finreport.test")
    with capture_logs() as logs:
        logger.info("period recorded", entity_id=1)

    assert logs == [{"event": "period recorded", "entity_id": 1, "log_level": "info"}]
