"""Logging setup shared by Tollgate entry points."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

APP_LOGGERS = ("tollgate", "tollgate_auth", "tollgate_config")


def configure_logging(level: str = "INFO") -> int:
    """Configure application logging.

    Sets up console output with timestamps and module names, applies
    ``level`` to the tollgate loggers and keeps third-party loggers at
    WARNING.

    Returns
    -------
    The numeric log level that was applied (INFO for unknown names)
    """
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("jwt").setLevel(logging.WARNING)

    return log_level
