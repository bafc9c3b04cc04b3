"""Logging configuration for service-versions-updater.

Decision lines ("Paper 1.21.1: Added missing version.") go to stdout,
warnings and errors to stderr, so a scheduled job's log keeps per-version
failures apart from the normal run output.
"""

import logging
import sys
from pathlib import Path


LOGGER_NAME = "service_versions"

VERBOSITY_LEVELS = {
    -1: logging.WARNING,
    0: logging.INFO,
    1: logging.DEBUG,
}


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def setup_logging(
    verbosity: int = 0,
    log_file: Path | None = None,
) -> logging.Logger:
    """Route the service_versions logger to stdout/stderr and an optional file.

    Args:
        verbosity: -1 quiet (problems only), 0 decisions, 1 adds debug detail
        log_file: Optional path the full DEBUG log is appended to
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    level = VERBOSITY_LEVELS[max(-1, min(1, verbosity))]
    if level < logging.WARNING:
        decisions = logging.StreamHandler(sys.stdout)
        decisions.setLevel(level)
        decisions.addFilter(_BelowWarning())
        decisions.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(decisions)

    problems = logging.StreamHandler(sys.stderr)
    problems.setLevel(logging.WARNING)
    problems.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(problems)

    if log_file:
        run_log = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        run_log.setLevel(logging.DEBUG)
        run_log.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(run_log)

    return logger


def get_logger() -> logging.Logger:
    """Get the service_versions logger instance."""
    return logging.getLogger(LOGGER_NAME)
