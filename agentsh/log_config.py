"""Logging configuration for agentsh."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "agentsh.log"


def configure_logging(level=logging.INFO, log_dir=None, console_level=logging.WARNING):
    """Set up logging with file rotation and console output.

    Safe to call more than once: handlers from an earlier call are replaced.
    """
    if log_dir is None:
        log_dir = Path.home() / ".agentsh" / "logs"
    log_dir = Path(log_dir)

    root_logger = logging.getLogger("agentsh")
    for handler in list(root_logger.handlers):
        if getattr(handler, "_agentsh_handler", False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console_handler._agentsh_handler = True

    handlers = [console_handler]
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILENAME, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
        )
    except OSError:
        file_handler = None
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        file_handler._agentsh_handler = True
        handlers.append(file_handler)

    root_logger.setLevel(min(level, console_level))
    for handler in handlers:
        root_logger.addHandler(handler)

    if file_handler is None:
        root_logger.warning(f"Could not write logs to {log_dir}, logging to console only")
    return root_logger
