# Logging utilities

import logging
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = "arcade_racer"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Route the package's loggers to the console and optionally a file.

    Calling it again replaces the handlers from the previous call, so a
    script that reconfigures (say, after applying overrides) does not print
    every line twice. The file handler always records DEBUG, which includes
    per-collision lines the console hides at INFO.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR) or number
        log_file: Optional file path for a full debug log

    Returns:
        The ``arcade_racer`` logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger
