import logging

import pytest

from src.taskrelay.core.logging_setup import LOGGER_NAME, configure_logging


@pytest.fixture()
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = list(logger.handlers)
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved


def test_configure_logging_is_idempotent(clean_logger, monkeypatch):
    monkeypatch.delenv("TASKRELAY_LOG_LEVEL", raising=False)
    configure_logging("DEBUG")
    configure_logging("DEBUG")
    assert len(clean_logger.handlers) == 1
    assert clean_logger.level == logging.DEBUG
    assert clean_logger.propagate is False


def test_env_var_overrides_level(clean_logger, monkeypatch):
    monkeypatch.setenv("TASKRELAY_LOG_LEVEL", "warning")
    configure_logging("DEBUG")
    assert clean_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(clean_logger, monkeypatch):
    monkeypatch.delenv("TASKRELAY_LOG_LEVEL", raising=False)
    configure_logging("chatty")
    assert clean_logger.level == logging.INFO
