"""
Progress logging for report runs.

Console diagnostics (``Warning:``/``Error:``) go to stdout through
Diagnostics; this logger carries per-file progress and tracebacks, on stderr
and optionally in a log file.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Route ``modelinfo.*`` records to stderr, plus ``log_file`` when given.

    Calling it again replaces the previous handlers.
    """
    logger = logging.getLogger("modelinfo")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to stderr%s", f" and {log_file}" if log_file else "")
