"""Tests for logging setup."""

import logging

import pytest
import structlog
from pythonjsonlogger import jsonlogger

from aiagen.core import Settings, configure_logging, generation_context
from aiagen.core.logging_config import HANDLER_NAME


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def own_handlers(root):
    return [h for h in root.handlers if h.get_name() == HANDLER_NAME]


@pytest.mark.unit
def test_json_logs_use_json_formatter(restore_root_logger, tmp_path):
    configure_logging(Settings(workspace_dir=tmp_path, log_level="warning", json_logs=True))

    (handler,) = own_handlers(restore_root_logger)
    assert isinstance(handler.formatter, jsonlogger.JsonFormatter)
    assert restore_root_logger.level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


@pytest.mark.unit
def test_reconfigure_replaces_own_handler(restore_root_logger, tmp_path):
    settings = Settings(workspace_dir=tmp_path, log_level="DEBUG")
    configure_logging(settings)
    configure_logging(settings)

    (handler,) = own_handlers(restore_root_logger)
    assert not isinstance(handler.formatter, jsonlogger.JsonFormatter)
    assert restore_root_logger.level == logging.DEBUG


@pytest.mark.unit
def test_unknown_level_falls_back_to_info(restore_root_logger, tmp_path):
    configure_logging(Settings(workspace_dir=tmp_path, log_level="chatty"))
    assert restore_root_logger.level == logging.INFO


@pytest.mark.unit
def test_generation_context_binds_and_clears():
    with generation_context("gen_1", "Demo", "dev1"):
        assert structlog.contextvars.get_contextvars() == {
            "generation": "gen_1",
            "project": "Demo",
            "user": "dev1",
        }
    assert "generation" not in structlog.contextvars.get_contextvars()
