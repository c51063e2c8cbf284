import logging
import os
from logging.handlers import RotatingFileHandler

from a11ycheck.platform.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
log_file_path = os.path.join(os.path.abspath(settings.LOG_DIR), "a11ycheck.log")


def _file_handler(formatter: logging.Formatter) -> RotatingFileHandler:
    os.makedirs(os.path.dirname(log_file_path), exist_ok=True)
    handler = RotatingFileHandler(log_file_path, maxBytes=10_000_000, backupCount=5)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str):
    """
    Logger that writes to the console and, unless LOG_TO_FILE is off,
    to logs/a11ycheck.log (rotated at 10 MB).
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL.upper())
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        logger.addHandler(_file_handler(formatter))

    return logger
