# tests/test_logging_config.py
"""
Testes da configuração de logging do SysBoot.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from _pytest.logging import LogCaptureHandler

from sysboot import logging_config


@pytest.fixture
def bare_root_logger(monkeypatch):
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers = []

    # pytest's logging plugin attaches its capture handlers to the root logger
    # during the call phase, after this fixture ran; hide them from the code
    # under test so the root logger is actually bare.
    real_get_logger = logging.getLogger

    def _get_logger(name=None):
        logger = real_get_logger(name)
        if logger is root:
            root.handlers = [h for h in root.handlers if not isinstance(h, LogCaptureHandler)]
        return logger

    monkeypatch.setattr(logging_config.logging, "getLogger", _get_logger)
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_reads_level_from_env(bare_root_logger, monkeypatch):
    monkeypatch.setenv("SYSBOOT_LOG_LEVEL", "debug")

    logging_config.setup_logging()

    assert bare_root_logger.level == logging.DEBUG
    assert len(bare_root_logger.handlers) == 1


def test_setup_logging_is_idempotent(bare_root_logger):
    logging_config.setup_logging(level="WARNING")
    logging_config.setup_logging(level="DEBUG")

    assert bare_root_logger.level == logging.WARNING
    assert len(bare_root_logger.handlers) == 1


def test_setup_logging_with_file(bare_root_logger, tmp_path):
    log_file = tmp_path / "logs" / "sysboot.log"

    logging_config.setup_logging(level="INFO", log_file=log_file)
    logging.getLogger("sysboot.test").info("hello file")
    for handler in bare_root_logger.handlers:
        handler.flush()

    assert any(isinstance(h, RotatingFileHandler) for h in bare_root_logger.handlers)
    assert "INFO sysboot.test: hello file" in log_file.read_text(encoding="utf-8")


def test_unknown_level_falls_back_to_info(bare_root_logger):
    logging_config.setup_logging(level="chatty")

    assert bare_root_logger.level == logging.INFO
