import logging
import sys

LOGGER_NAME = "dbsniff"

def setup_logger(level: int = logging.WARNING) -> logging.Logger:
    """
    Configure the package logger. Safe to call more than once; the handler
    is only attached the first time, later calls just change the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s", datefmt="%H:%M:%S")
        h.setFormatter(fmt)
        logger.addHandler(h)
    logger.setLevel(level)
    return logger
