"""Logging setup for the runplanner CLI.

Services log with keyword context (``logger.info("Workout created", plan_id=...)``);
the sinks below render that context through ``{extra}``.
"""

import sys
from pathlib import Path

from loguru import logger

from runplanner.config.settings import Settings, settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level> <dim>{extra}</dim>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(config: Settings | None = None, level: str | None = None) -> list[int]:
    """Replace all loguru sinks with the configured console and file sinks.

    Args:
        config: Settings to read LOG_LEVEL, LOG_FILE, LOG_ROTATION and
            LOG_RETENTION from. Defaults to the process settings.
        level: Overrides the configured level (e.g. from --log-level)

    Returns:
        Handler ids of the sinks that were added
    """
    config = config or settings
    level = (level or config.log_level).upper()

    logger.remove()
    handler_ids = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)]

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_path,
                format=FILE_FORMAT,
                level=level,
                rotation=config.log_rotation,
                retention=config.log_retention,
                compression="zip",
                backtrace=True,
                diagnose=False,
            )
        )

    logger.debug("Logger configured", level=level, log_file=config.log_file)
    return handler_ids
