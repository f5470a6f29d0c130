"""
Logging configuration for jam judging.

One stderr sink for the operator plus file sinks under a log directory:
jam_judging.log keeps recorded votes and ranking reports, and
jam_judging_debug.log adds per-pair selection detail when debugging.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {name}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)

logger.configure(extra={"component": "jam_judging"})


def setup_logging(level: str = "INFO", debug: bool = False, log_dir: Path | None = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: Force DEBUG on the console and write the debug log file
        log_dir: Directory for log files; None keeps logging on stderr only
    """
    logger.remove()
    _ = logger.add(sys.stderr, level="DEBUG" if debug else level, format=CONSOLE_FORMAT)

    if log_dir is None:
        return

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    _ = logger.add(
        log_dir / "jam_judging.log",
        level="INFO",
        format=FILE_FORMAT,
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )
    if debug:
        _ = logger.add(
            log_dir / "jam_judging_debug.log",
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="50 MB",
            retention="3 days",
            compression="zip",
        )


def get_logger(component: str | None = None) -> Any:
    """
    Logger tagged with the component that emits it.

    Records from an untagged logger show up under "jam_judging".
    """
    if component:
        return logger.bind(component=component)
    return logger
