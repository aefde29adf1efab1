"""
Package logging setup.

Library modules only create ``logging.getLogger(__name__)`` loggers under the
``pypelayout`` namespace. The command line calls ``setup_logging`` once to
attach handlers; embedding applications may skip it and configure logging
themselves.
"""
import logging
import sys
from pathlib import Path

LOGGER_NAME = "pypelayout"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def resolve_level(level: int | str) -> int:
    """
    Accept a logging level number or name ("debug", "WARNING").

    Raises:
        ValueError: If the name is not a logging level
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def setup_logging(level: int | str = logging.INFO, log_file: str | Path | None = None) -> logging.Logger:
    """
    Configure the 'pypelayout' logger.

    Args:
        level: Logging level number or name
        log_file: Optional path to also write the log to (overwritten)

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    # Re-initialising replaces handlers, closing any open log file
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(
        "Logging initialized at %s%s",
        logging.getLevelName(logger.level),
        f", writing to {log_file}" if log_file else "",
    )
    return logger
