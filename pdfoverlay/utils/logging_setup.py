"""Logging setup for the viewer application."""

import logging
import sys

# Event-loop bridge loggers that are noisy below WARNING
_LOOP_LOGGERS = [
    "qasync",
    "asyncio",
]


def configure_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """
    Configure application logging to stdout.

    Args:
        level: Logging level (default: INFO)
        verbose: If True, let event-loop loggers through at ``level``.
            If False, limit them to warnings.
    """
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    loop_level = level if verbose else max(level, logging.WARNING)
    for logger_name in _LOOP_LOGGERS:
        logging.getLogger(logger_name).setLevel(loop_level)
