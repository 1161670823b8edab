import atexit
import logging
import logging.handlers
import os
from pathlib import (
    Path,
)
import queue
import sys
from typing import (
    Any,
)

ROOT_LOGGER_NAME = "ipns"

# Default format for log messages
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

log_queue: "queue.Queue[Any]" = queue.Queue()

# Store the current listener to stop it on exit
_current_listener: logging.handlers.QueueListener | None = None


def _parse_debug_modules(debug_str: str) -> dict[str, int]:
    """
    Parse the IPNS_DEBUG environment variable into module-specific log levels.

    Format examples:
    - "DEBUG"  # All modules at DEBUG level
    - "ipns.record.validator:DEBUG"  # Only the validator at DEBUG
    - "record.validator:DEBUG"  # Same as above, ipns prefix is optional
    - "record.builder:DEBUG,record.validator:INFO"  # Multiple modules
    """
    module_levels: dict[str, int] = {}

    if not debug_str or debug_str.isspace():
        return module_levels

    # A plain log level without any colons applies to everything
    level_names = logging._nameToLevel
    if ":" not in debug_str and debug_str.upper() in level_names:
        return {"": level_names[debug_str.upper()]}

    for part in debug_str.split(","):
        if ":" not in part:
            continue

        module, level = part.split(":", 1)
        level = level.strip().upper()
        if level not in level_names:
            continue

        module = module.strip()
        if module.startswith(f"{ROOT_LOGGER_NAME}."):
            module = module[len(ROOT_LOGGER_NAME) + 1 :]
        module = module.replace("/", ".").strip(".")

        module_levels[module] = level_names[level]

    return module_levels


def _disable(root_logger: logging.Logger) -> None:
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    root_logger.propagate = False


def setup_logging() -> None:
    """
    Set up logging configuration based on environment variables.

    Environment Variables:
        IPNS_DEBUG
            Controls logging levels, e.g. "DEBUG" or
            "record.validator:DEBUG,record.builder:INFO".

        IPNS_DEBUG_FILE
            If set, log records are also written to this file.

    Without IPNS_DEBUG the ``ipns`` logger only lets warnings through and
    does not propagate to the root logger.
    """
    global _current_listener

    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    module_levels = _parse_debug_modules(os.environ.get("IPNS_DEBUG", ""))
    if not module_levels:
        _disable(root_logger)
        return

    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    handlers: list[logging.Handler] = []
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    log_file = os.environ.get("IPNS_DEBUG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    queue_handler = logging.handlers.QueueHandler(log_queue)

    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.propagate = False
    root_logger.setLevel(module_levels.get("", logging.INFO))

    for module, level in module_levels.items():
        if module:
            logging.getLogger(f"{ROOT_LOGGER_NAME}.{module}").setLevel(level)

    _current_listener = logging.handlers.QueueListener(
        log_queue, *handlers, respect_handler_level=True
    )
    _current_listener.start()


@atexit.register
def cleanup_logging() -> None:
    """Stop the queue listener on exit."""
    global _current_listener
    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None
