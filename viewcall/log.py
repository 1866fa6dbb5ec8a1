"""
Logging
loguru sinks shared by the library and the example entry point
"""

import sys
from typing import List, Optional

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> List[int]:
    """
    Replace the default loguru handler

    Args:
        level: Console level
        log_file: Optional file sink, rotated daily and kept 7 days (DEBUG level)

    Returns:
        Ids of the installed handlers
    """
    logger.remove()

    handler_ids = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)]

    if log_file:
        handler_ids.append(logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG"
        ))

    return handler_ids
