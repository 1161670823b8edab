import logging
import logging.handlers
import queue

import pytest

from ipns.utils import logging as ipns_logging
from ipns.utils.logging import (
    _parse_debug_modules,
    cleanup_logging,
    log_queue,
    setup_logging,
)


def _reset_logging():
    """Reset all ipns logging state."""
    cleanup_logging()

    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("ipns."):
            logging.getLogger(name).setLevel(logging.NOTSET)

    logger = logging.getLogger("ipns")
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.WARNING)

    while not log_queue.empty():
        try:
            log_queue.get_nowait()
        except queue.Empty:
            break


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove relevant environment variables before each test."""
    monkeypatch.delenv("IPNS_DEBUG", raising=False)
    monkeypatch.delenv("IPNS_DEBUG_FILE", raising=False)
    _reset_logging()
    yield
    _reset_logging()


@pytest.mark.parametrize(
    "debug_str, expected",
    [
        ("", {}),
        ("   ", {}),
        ("DEBUG", {"": logging.DEBUG}),
        ("info", {"": logging.INFO}),
        ("record.validator:DEBUG", {"record.validator": logging.DEBUG}),
        ("ipns.record.validator:DEBUG", {"record.validator": logging.DEBUG}),
        ("record/builder:WARN", {"record.builder": logging.WARNING}),
        (
            "record.builder:DEBUG,record.validator:INFO",
            {"record.builder": logging.DEBUG, "record.validator": logging.INFO},
        ),
        ("record.builder:NOPE,no_colon", {}),
        ("INVALID_LEVEL", {}),
    ],
)
def test_parse_debug_modules(debug_str, expected):
    assert _parse_debug_modules(debug_str) == expected


def test_logging_disabled():
    """Test that logging is disabled when IPNS_DEBUG is not set."""
    setup_logging()
    logger = logging.getLogger("ipns")

    assert logger.level == logging.WARNING
    assert not logger.handlers
    assert ipns_logging._current_listener is None


def test_logging_with_debug_env(monkeypatch):
    monkeypatch.setenv("IPNS_DEBUG", "DEBUG")
    setup_logging()
    logger = logging.getLogger("ipns")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.handlers.QueueHandler)
    assert logging.getLogger("ipns.record.builder").getEffectiveLevel() == (
        logging.DEBUG
    )


def test_module_specific_logging(monkeypatch):
    monkeypatch.setenv("IPNS_DEBUG", "record.validator:DEBUG,record.builder:ERROR")
    setup_logging()

    assert logging.getLogger("ipns").level == logging.INFO
    assert logging.getLogger("ipns.record.validator").level == logging.DEBUG
    assert logging.getLogger("ipns.record.builder").level == logging.ERROR
    assert logging.getLogger("ipns.identity").getEffectiveLevel() == logging.INFO


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("IPNS_DEBUG", "INVALID_LEVEL")
    setup_logging()

    assert logging.getLogger("ipns").level == logging.WARNING


def test_setup_twice_replaces_listener(monkeypatch):
    monkeypatch.setenv("IPNS_DEBUG", "INFO")
    setup_logging()
    first = ipns_logging._current_listener
    setup_logging()

    assert ipns_logging._current_listener is not None
    assert ipns_logging._current_listener is not first
    assert len(logging.getLogger("ipns").handlers) == 1


def test_custom_log_file(monkeypatch, tmp_path):
    log_file = tmp_path / "logs" / "ipns.log"
    monkeypatch.setenv("IPNS_DEBUG", "INFO")
    monkeypatch.setenv("IPNS_DEBUG_FILE", str(log_file))
    setup_logging()

    logging.getLogger("ipns.record.validator").info("Test message")
    # Stopping the listener drains the queue into the handlers
    cleanup_logging()

    assert log_file.exists()
    assert "Test message" in log_file.read_text()
