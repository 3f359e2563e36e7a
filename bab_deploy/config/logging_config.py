"""
Logging setup for the BAB verification scripts.

Every script logger gets:
- a console handler (stdout unless told otherwise)
- ``<name>.log``, rolled over at midnight and kept for 30 days
- ``<name>_errors.log`` with ERROR and above, size-rotated

The ``bab_deploy`` package logger shares the script's handlers, so driver and
API client messages land in the same files.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional, TextIO, Union


# Created on first use, relative to where the script runs
LOG_DIR = Path.cwd() / "logs"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "bab_deploy"

DAILY_BACKUPS = 30
ERROR_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
ERROR_LOG_BACKUPS = 5


def _formatter(detailed: bool) -> logging.Formatter:
    return logging.Formatter(DETAILED_FORMAT if detailed else SIMPLE_FORMAT, datefmt=DATE_FORMAT)


def _file_handlers(name: str, level: int, directory: Path, detailed: bool) -> list[logging.Handler]:
    directory.mkdir(parents=True, exist_ok=True)

    daily = TimedRotatingFileHandler(
        directory / f"{name}.log",
        when="midnight",
        interval=1,
        backupCount=DAILY_BACKUPS,
        encoding="utf-8",
    )
    daily.setLevel(level)
    daily.setFormatter(_formatter(detailed))

    errors = RotatingFileHandler(
        directory / f"{name}_errors.log",
        maxBytes=ERROR_LOG_MAX_BYTES,
        backupCount=ERROR_LOG_BACKUPS,
        encoding="utf-8",
    )
    errors.setLevel(logging.ERROR)
    errors.setFormatter(_formatter(detailed=True))
    return [daily, errors]


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_dir: Union[Path, str, None, bool] = None,
    console: bool = True,
    detailed: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the logger ``name`` and attach its handlers to ``bab_deploy`` too.

    Args:
        name: Logger name, also the log file stem
        level: Level for the logger and its non-error handlers
        log_dir: Where log files go (``./logs`` when None, console only when False)
        console: Also write to the console
        detailed: Include logger name and source line in every record
        stream: Console stream (stdout when None)

    Returns:
        The configured logger. Calling again with the same name returns it unchanged.

    Example:
        >>> logger = setup_logger("verify_bab", level=logging.DEBUG)
        >>> logger.info("Submitting contracts/BAB/BAB.sol:BAB")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Already configured by an earlier call
    if logger.handlers:
        return logger

    handlers: list[logging.Handler] = []
    if console:
        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(_formatter(detailed))
        handlers.append(console_handler)
    if log_dir is not False:
        handlers.extend(_file_handlers(name, level, Path(log_dir) if log_dir else LOG_DIR, detailed))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in handlers:
        logger.addHandler(handler)
        package_logger.addHandler(handler)

    return logger


def log_verification(logger: logging.Logger, result) -> None:
    """Write one pipe-separated line per successful verification."""
    status = "ALREADY VERIFIED" if result.already_verified else "VERIFIED"
    msg = f"{status} | {result.contract} | {result.address} | {result.network}"
    if result.guid:
        msg += f" | GUID: {result.guid}"
    logger.info(msg)


def get_script_logger(
    script_name: str,
    debug: bool = False,
    log_dir: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Logger for a command line script; ``debug`` switches to DEBUG and the detailed format."""
    return setup_logger(
        script_name,
        level=logging.DEBUG if debug else logging.INFO,
        log_dir=log_dir,
        detailed=debug,
        stream=stream,
    )
