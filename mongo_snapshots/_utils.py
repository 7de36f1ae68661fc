import logging
import sys

logger = logging.getLogger("mongo-snapshots")

LOG_FORMAT = "%(asctime)s - [%(name)s] - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Safe to call more than once; existing handlers are replaced so repeated
    calls do not duplicate output.
    """
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    return logger


def format_megabytes(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.2f}"


def format_kilobytes(size_bytes: int) -> str:
    return f"{size_bytes / 1024:.2f}"
